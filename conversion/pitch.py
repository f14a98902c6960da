# conversion/pitch.py
from typing import Tuple

from conversion.timing import round_half_away

PITCH_UNITS_PER_SEMITONE = 13.75
REFERENCE_PITCH = 60        # pitch unit 0 = C4
PITCH_BEND_SCALE = 8192


class PitchMapper:
    """Splits a game pitch value into a MIDI note number plus pitch bend."""

    def __init__(self, pitch_bend_range: int = 2):
        if pitch_bend_range < 1:
            raise ValueError(f"pitch_bend_range must be >= 1, got {pitch_bend_range!r}")
        self.pitch_bend_range = pitch_bend_range

    def map(self, tmb_pitch: float) -> Tuple[int, int]:
        exact = tmb_pitch / PITCH_UNITS_PER_SEMITONE + REFERENCE_PITCH
        whole = round_half_away(exact)
        bend = round_half_away((exact - whole) / self.pitch_bend_range * PITCH_BEND_SCALE)
        # +-1 is float noise in the chart, not an intended bend
        if abs(bend) == 1:
            bend = 0
        return whole, bend

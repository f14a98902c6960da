# conversion/aux_tracks.py
import logging
import math
from typing import Sequence

from chart.model import BackgroundCue, ImprovZone, LyricEntry
from conversion import diagnostics as diag
from conversion.diagnostics import Diagnostics
from conversion.events import Lyric, Marker, Track
from conversion.timing import TICKS_PER_QUARTER_NOTE, background_tick, tick


class DeltaClock:
    """Running tick position of one track; hands out deltas."""

    def __init__(self, name: str, diagnostics: Diagnostics):
        self.name = name
        self.diagnostics = diagnostics
        self.ticks = 0

    def advance(self, at: int) -> int:
        delta = at - self.ticks
        if delta < 0:
            self.diagnostics.warn(
                diag.AUX_OUT_OF_ORDER,
                f"{self.name} event at tick {at} is before the previous one ({self.ticks}). "
                f"Placing it at tick {self.ticks}.")
            return 0
        self.ticks = at
        return delta


class AuxiliaryTrackBuilder:
    def __init__(self, diagnostics: Diagnostics, tpqn: int = TICKS_PER_QUARTER_NOTE):
        self.diagnostics = diagnostics
        self.tpqn = tpqn

    def improv_zones(self, zones: Sequence[ImprovZone]) -> Track:
        track: Track = []
        if not zones:
            return track
        logging.info("Converting improv zones, total = %d", len(zones))
        clock = DeltaClock("Improv zone", self.diagnostics)
        for i, z in enumerate(zones):
            start = tick(z.start_beat, self.tpqn)
            end = tick(z.end_beat, self.tpqn)
            logging.debug("ImprovZones[%d] start time = %s(%d ticks) end time = %s(%d ticks)",
                          i, z.start_beat, start, z.end_beat, end)
            track.append(Marker("improv_start", clock.advance(start)))
            track.append(Marker("improv_end", clock.advance(end)))
        return track

    def lyrics(self, lyrics: Sequence[LyricEntry]) -> Track:
        track: Track = []
        if not lyrics:
            return track
        logging.info("Converting lyrics, total = %d", len(lyrics))
        clock = DeltaClock("Lyric", self.diagnostics)
        for i, l in enumerate(lyrics):
            start = tick(l.bar, self.tpqn)
            logging.debug("Lyrics[%d] start time = %s(%d ticks) text = %s", i, l.bar, start, l.text)
            track.append(Lyric(l.text, clock.advance(start)))
        return track

    def background(self, cues: Sequence[BackgroundCue], tempo: float) -> Track:
        track: Track = []
        if not cues:
            return track
        logging.info("Converting background events, total = %d", len(cues))
        clock = DeltaClock("Background", self.diagnostics)
        for i, b in enumerate(cues):
            start = background_tick(b.raw_time, tempo, self.tpqn)
            logging.debug("BgEvents[%d] start time = %s(%d ticks) id = %s", i, b.raw_time, start, b.cue_id)
            track.append(Marker(f"bg_{math.floor(b.cue_id)}", clock.advance(start)))
        return track

# conversion/timing.py
import math

TICKS_PER_QUARTER_NOTE = 960
MICROSECONDS_PER_MINUTE = 60_000_000


def round_half_away(x: float) -> int:
    """Round to nearest int, halves away from zero (Python's round() goes to even)."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def tick(beat: float, tpqn: int = TICKS_PER_QUARTER_NOTE) -> int:
    return round_half_away(beat * tpqn)


def background_tick(raw_time: float, tempo: float, tpqn: int = TICKS_PER_QUARTER_NOTE) -> int:
    # bgdata times get an extra tempo/60 factor that notes, lyrics and improv
    # zones don't; kept as-is so output matches charts already converted.
    seconds_per_beat = tempo / 60.0
    return round_half_away(seconds_per_beat * raw_time * tpqn)


def microseconds_per_beat(tempo: float) -> int:
    if tempo <= 0:
        raise ValueError(f"tempo must be positive, got {tempo!r}")
    return round_half_away(60.0 / tempo * 1_000_000)


def slide_length(note_ticks: int, tpqn: int = TICKS_PER_QUARTER_NOTE) -> int:
    """Length of the end note of a slide: an eighth of a beat or half the note, whichever is shorter."""
    half = int(note_ticks / 2)
    return min(tpqn // 8, half)

# conversion/events.py
"""Track events produced by the converter.

Each event carries ``delta_ticks``: ticks since the previous event of the same
track. They are plain values; ``midi.writer`` turns them into mido messages.
"""
from dataclasses import dataclass, field
from typing import List, Union

from conversion.diagnostics import Diagnostic


@dataclass(frozen=True)
class NoteOn:
    pitch: int
    delta_ticks: int = 0


@dataclass(frozen=True)
class NoteOff:
    pitch: int
    delta_ticks: int = 0


@dataclass(frozen=True)
class PitchBend:
    value: int          # signed, 0 = no bend
    delta_ticks: int = 0


@dataclass(frozen=True)
class Marker:
    text: str
    delta_ticks: int = 0


@dataclass(frozen=True)
class Lyric:
    text: str
    delta_ticks: int = 0


@dataclass(frozen=True)
class SetTempo:
    microseconds_per_beat: int
    delta_ticks: int = 0


Event = Union[NoteOn, NoteOff, PitchBend, Marker, Lyric, SetTempo]
Track = List[Event]


def absolute_ticks(track: Track) -> List[int]:
    """Running tick position of every event in ``track``."""
    out: List[int] = []
    t = 0
    for e in track:
        t += e.delta_ticks
        out.append(t)
    return out


@dataclass(frozen=True)
class Complete:
    dropped_count: int = 0

    @property
    def complete(self) -> bool:
        return True


@dataclass(frozen=True)
class TruncatedAtPassLimit:
    dropped_count: int
    passes: int

    @property
    def complete(self) -> bool:
        return False


PassStatus = Union[Complete, TruncatedAtPassLimit]


@dataclass
class ConversionResult:
    ticks_per_quarter_note: int
    tracks: List[Track] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    status: PassStatus = field(default_factory=Complete)
    note_passes: int = 0

    @property
    def event_count(self) -> int:
        return sum(len(t) for t in self.tracks)

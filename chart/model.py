# chart/model.py
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class Note:
    start_beat: float
    duration_beats: float
    start_pitch: float   # game pitch units, 13.75 per semitone, 0 = C4
    reserved: float      # 4th column of a .tmb note row, never used by conversion
    end_pitch: float

    @property
    def end_beat(self) -> float:
        return self.start_beat + self.duration_beats

    @property
    def is_slide(self) -> bool:
        return self.start_pitch != self.end_pitch

    @classmethod
    def from_row(cls, row: Sequence[float]) -> "Note":
        return cls(float(row[0]), float(row[1]), float(row[2]), float(row[3]), float(row[4]))


@dataclass(frozen=True)
class ImprovZone:
    start_beat: float
    end_beat: float


@dataclass(frozen=True)
class LyricEntry:
    bar: float
    text: str


@dataclass(frozen=True)
class BackgroundCue:
    raw_time: float   # not in beats, see conversion.timing.background_tick
    cue_id: float


@dataclass
class ChartData:
    """In-memory form of a Trombone Champ ``.tmb`` chart."""
    tempo: float
    name: str = ""
    short_name: str = ""
    trackref: str = ""
    notes: List[Note] = field(default_factory=list)
    improv_zones: List[ImprovZone] = field(default_factory=list)
    lyrics: List[LyricEntry] = field(default_factory=list)
    bgdata: List[BackgroundCue] = field(default_factory=list)

    def summary(self) -> List[Tuple[str, str]]:
        return [
            ("Trackref", self.trackref),
            ("Name", self.name),
            ("Short Name", self.short_name),
            ("Tempo", f"{self.tempo:g}"),
            ("Notes", str(len(self.notes))),
        ]

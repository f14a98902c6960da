# conversion/diagnostics.py
import logging
from dataclasses import dataclass
from typing import List, Optional

# diagnostic codes
DELTA_FOLDED = "delta_folded"
NOTE_DEFERRED = "note_deferred"
JOINED_BEND_MISMATCH = "joined_bend_mismatch"
NEGATIVE_DURATION = "negative_duration"
START_CLAMPED = "start_clamped"
FOLD_INCOMPLETE = "fold_incomplete"
PASS_LIMIT = "pass_limit"
STALLED = "stalled"
AUX_OUT_OF_ORDER = "aux_out_of_order"


@dataclass(frozen=True)
class Diagnostic:
    level: int          # logging level
    code: str
    message: str
    beat: Optional[float] = None


class Diagnostics:
    """Collects conversion warnings; every record is also sent to logging."""

    def __init__(self):
        self.records: List[Diagnostic] = []

    def warn(self, code: str, message: str, beat: Optional[float] = None):
        self._add(logging.WARNING, code, message, beat)

    def error(self, code: str, message: str, beat: Optional[float] = None):
        self._add(logging.ERROR, code, message, beat)

    def _add(self, level: int, code: str, message: str, beat: Optional[float]):
        self.records.append(Diagnostic(level, code, message, beat))
        logging.log(level, message)

    def by_code(self, code: str) -> List[Diagnostic]:
        return [d for d in self.records if d.code == code]

    def __len__(self):
        return len(self.records)

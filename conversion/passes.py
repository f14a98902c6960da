# conversion/passes.py
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from chart.model import Note
from conversion import diagnostics as diag
from conversion.diagnostics import Diagnostics
from conversion.events import Complete, PassStatus, Track, TruncatedAtPassLimit
from conversion.notes import NoteEventBuilder, PassState

MAX_PASSES = 1000


@dataclass
class NotePass:
    notes: List[Note]
    note_track: Track
    bend_track: Track    # empty for every pass but the first


@dataclass
class ResolvedNotes:
    passes: List[NotePass] = field(default_factory=list)
    status: PassStatus = field(default_factory=Complete)


class OverlapResolver:
    """Splits overlapping notes over several passes, one note track per pass.

    Each pass scans the remaining notes in chart order and keeps every note
    that starts at or after the end of the last kept one; the rest wait for
    the next pass.
    """

    def __init__(self, builder: NoteEventBuilder, diagnostics: Diagnostics,
                 max_passes: int = MAX_PASSES):
        self.builder = builder
        self.diagnostics = diagnostics
        self.max_passes = max_passes

    def run_pass(self, remaining: List[Note], first_pass: bool) -> PassState:
        st = PassState(first_pass=first_pass)
        i = 0
        while i < len(remaining):
            if self.builder.add(remaining[i], st):
                del remaining[i]
            else:
                i += 1
        return st

    def resolve(self, notes: Sequence[Note]) -> ResolvedNotes:
        logging.info("Converting notes: total = %d, pitch bend range = %d",
                     len(notes), self.builder.mapper.pitch_bend_range)
        remaining = list(notes)
        out = ResolvedNotes()

        while remaining and len(out.passes) < self.max_passes:
            logging.info("Note pass %d", len(out.passes))
            st = self.run_pass(remaining, first_pass=not out.passes)
            if not st.consumed:
                # state is reset every pass, so an empty pass would repeat forever
                self.diagnostics.error(
                    diag.STALLED,
                    f"No note could be placed in pass {len(out.passes)}; "
                    f"dropping {len(remaining)} notes.")
                out.status = TruncatedAtPassLimit(len(remaining), len(out.passes))
                return out
            out.passes.append(NotePass(st.consumed, st.notes.events(), st.bends.events()))

        if remaining:
            self.diagnostics.error(
                diag.PASS_LIMIT,
                f"Reached the max number of note passes ({self.max_passes}), "
                f"{len(remaining)} notes will be missing from the MIDI.")
            out.status = TruncatedAtPassLimit(len(remaining), len(out.passes))
        return out

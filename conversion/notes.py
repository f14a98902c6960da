# conversion/notes.py
import logging
from dataclasses import dataclass, field, replace
from typing import List

from chart.model import Note
from conversion import diagnostics as diag
from conversion.diagnostics import Diagnostics
from conversion.events import Event, NoteOff, NoteOn, PitchBend, Track
from conversion.pitch import PitchMapper
from conversion.timing import TICKS_PER_QUARTER_NOTE, slide_length, tick


class TrackBuffer:
    """Event list whose trailing run of same-tick events stays pending.

    The pending run is only committed once an event at a later tick arrives,
    so a 1-tick correction can still move the end of the previous note.
    """

    def __init__(self):
        self._committed: Track = []
        self._pending: Track = []

    def emit(self, event: Event):
        if event.delta_ticks > 0 and self._pending:
            self._committed.extend(self._pending)
            self._pending = []
        self._pending.append(event)

    def __bool__(self):
        return bool(self._committed or self._pending)

    def shift_pending(self, ticks: int) -> int:
        """Move the end of the pending run by ``ticks``. Returns the shift applied."""
        if not self._pending:
            return 0
        # prefer the last event (keeps slide ends apart like the source charts),
        # fall back to the head of the run when the last one can't go negative
        idx = len(self._pending) - 1
        if self._pending[idx].delta_ticks + ticks < 0:
            idx = 0
        ev = self._pending[idx]
        new_delta = max(0, ev.delta_ticks + ticks)
        self._pending[idx] = replace(ev, delta_ticks=new_delta)
        return new_delta - ev.delta_ticks

    def events(self) -> Track:
        return self._committed + self._pending


@dataclass
class PassState:
    first_pass: bool
    last_event_ticks: int = 0
    last_bend_ticks: int = 0
    last_end_pitch: int = 0
    last_end_bend: int = 0
    notes: TrackBuffer = field(default_factory=TrackBuffer)
    bends: TrackBuffer = field(default_factory=TrackBuffer)
    consumed: List[Note] = field(default_factory=list)


class NoteEventBuilder:
    """Turns one chart note into note (and pitch-bend) events for the current pass."""

    def __init__(self, mapper: PitchMapper, diagnostics: Diagnostics,
                 tpqn: int = TICKS_PER_QUARTER_NOTE):
        self.mapper = mapper
        self.diagnostics = diagnostics
        self.tpqn = tpqn

    def add(self, note: Note, st: PassState) -> bool:
        """Append ``note`` to the pass. Returns False if it overlaps and must wait for a later pass."""
        start_ticks = tick(note.start_beat, self.tpqn)
        end_ticks = tick(note.end_beat, self.tpqn)
        start_delta = start_ticks - st.last_event_ticks
        bend_delta = start_ticks - st.last_bend_ticks

        logging.debug("Note start: %s end: %s start pitch: %s end pitch: %s",
                      note.start_beat, note.end_beat, note.start_pitch, note.end_pitch)

        # +-1 tick deltas come from float precision in the chart, larger
        # negative ones are real overlaps and go to the next pass
        if abs(start_delta) == 1:
            if st.notes:
                applied = st.notes.shift_pending(start_delta)
                if applied == start_delta:
                    self.diagnostics.warn(
                        diag.DELTA_FOLDED,
                        f"Note at beat {note.start_beat} has a delta = {start_delta}. "
                        f"Adjusting previous note to connect to it.",
                        note.start_beat)
                else:
                    self.diagnostics.warn(
                        diag.FOLD_INCOMPLETE,
                        f"Note at beat {note.start_beat} has a delta = {start_delta}, but the previous "
                        f"note can only move by {applied}. Starting it at the previous note's end.",
                        note.start_beat)
                aligned = bend_delta == start_delta
                start_ticks = st.last_event_ticks + applied
                if aligned and st.bends:
                    st.bends.shift_pending(applied)
                    st.last_bend_ticks = start_ticks
                bend_delta = start_ticks - st.last_bend_ticks
                start_delta = 0
            elif start_delta < 0:
                self.diagnostics.warn(
                    diag.START_CLAMPED,
                    f"Note at beat {note.start_beat} starts before tick 0. Moving it to tick 0.",
                    note.start_beat)
                start_ticks = 0
                start_delta = 0
                bend_delta = 0
        elif start_delta < 0:
            self.diagnostics.warn(
                diag.NOTE_DEFERRED,
                f"Note at beat {note.start_beat} has a negative delta ({start_delta}). "
                f"Leaving until the next pass.",
                note.start_beat)
            return False

        if end_ticks < start_ticks:
            self.diagnostics.warn(
                diag.NEGATIVE_DURATION,
                f"Note at beat {note.start_beat} ends before it starts. Treating it as zero length.",
                note.start_beat)
            end_ticks = start_ticks

        start_pitch, start_bend = self.mapper.map(note.start_pitch)
        end_pitch, end_bend = self.mapper.map(note.end_pitch)

        if start_delta == 0 and st.last_end_pitch == start_pitch and start_bend != st.last_end_bend:
            self.diagnostics.warn(
                diag.JOINED_BEND_MISMATCH,
                f"Note at beat {note.start_beat} is connected to previous note, "
                f"but has a different pitch bend ({start_bend}).",
                note.start_beat)

        logging.debug("Converted note start: %d end: %d start pitch: %d start bend: %d end pitch: %d end bend: %d",
                      start_ticks, end_ticks, start_pitch, start_bend, end_pitch, end_bend)

        length = end_ticks - start_ticks
        if start_pitch == end_pitch:
            st.notes.emit(NoteOn(start_pitch, start_delta))
            st.notes.emit(NoteOff(end_pitch, length))
        else:
            # slide: a second note takes over for the last slide_len ticks
            slide_len = slide_length(length, self.tpqn)
            slide_start = length - slide_len
            st.notes.emit(NoteOn(start_pitch, start_delta))
            st.notes.emit(NoteOn(end_pitch, slide_start))
            st.notes.emit(NoteOff(start_pitch, slide_len))
            st.notes.emit(NoteOff(end_pitch, 0))

        # only the first pass gets pitch bends, overlapping notes can't share one channel's bend
        if st.first_pass:
            if start_bend != st.last_end_bend:
                st.bends.emit(PitchBend(st.last_end_bend, bend_delta))
                st.bends.emit(PitchBend(start_bend, 0))
                st.last_bend_ticks = start_ticks
                bend_delta = 0

            if end_bend != start_bend:
                if start_pitch == end_pitch:
                    st.bends.emit(PitchBend(end_bend, bend_delta + length))
                else:
                    # switch bend one tick before the end note takes over
                    before = max(0, bend_delta + slide_start - 1)
                    st.bends.emit(PitchBend(start_bend, before))
                    st.bends.emit(PitchBend(end_bend, bend_delta + slide_start - before))
                    st.bends.emit(PitchBend(end_bend, slide_len))
                st.last_bend_ticks = end_ticks

        st.last_event_ticks = end_ticks
        st.last_end_pitch = end_pitch
        st.last_end_bend = end_bend
        st.consumed.append(note)
        return True

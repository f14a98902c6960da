import random

from chart.model import Note
from conversion import diagnostics as diag
from conversion.diagnostics import Diagnostics
from conversion.events import Complete, NoteOff, NoteOn, TruncatedAtPassLimit
from conversion.notes import NoteEventBuilder
from conversion.passes import OverlapResolver
from conversion.pitch import PitchMapper


def resolve(rows, max_passes=1000):
    d = Diagnostics()
    resolver = OverlapResolver(NoteEventBuilder(PitchMapper(2), d), d, max_passes)
    notes = [Note.from_row(r) for r in rows]
    return notes, resolver.resolve(notes), d


def test_overlap_splits_into_two_passes():
    notes, res, d = resolve([[0, 2, 0, 0, 0], [1, 1, 0, 0, 0]])
    assert res.status == Complete()
    assert [p.notes for p in res.passes] == [[notes[0]], [notes[1]]]
    assert res.passes[1].note_track == [NoteOn(60, 960), NoteOff(60, 960)]
    assert res.passes[1].bend_track == []
    assert len(d.by_code(diag.NOTE_DEFERRED)) == 1


def test_non_overlapping_notes_take_one_pass():
    rows = [[i * 1.5, 1, (i % 5) * 13.75, 0, (i % 3) * 13.75] for i in range(40)]
    notes, res, _ = resolve(rows)
    assert len(res.passes) == 1
    assert res.passes[0].notes == notes


def test_empty_input_has_no_passes():
    _, res, d = resolve([])
    assert res.passes == []
    assert res.status.complete
    assert len(d) == 0


def test_every_note_lands_in_exactly_one_pass():
    rng = random.Random(42)
    for _ in range(20):
        rows = [[rng.uniform(0, 32), rng.uniform(0.1, 4), rng.uniform(-100, 100), 0,
                 rng.uniform(-100, 100)] for _ in range(rng.randint(1, 60))]
        notes, res, _ = resolve(rows)
        assert res.status.complete
        placed = [id(n) for p in res.passes for n in p.notes]
        assert sorted(placed) == sorted(id(n) for n in notes)
        for p in res.passes:
            assert all(e.delta_ticks >= 0 for e in p.note_track)
            assert all(e.delta_ticks >= 0 for e in p.bend_track)
        for p in res.passes[1:]:
            assert p.bend_track == []


def test_pass_order_keeps_chart_order():
    notes, res, _ = resolve([[0, 4, 0, 0, 0], [1, 1, 0, 0, 0], [2, 1, 0, 0, 0], [5, 1, 0, 0, 0]])
    assert [p.notes for p in res.passes] == [[notes[0], notes[3]], [notes[1], notes[2]]]


def test_pass_limit_drops_remaining_notes():
    rows = [[0, 4, 0, 0, 0], [0.5, 4, 0, 0, 0], [1, 4, 0, 0, 0], [1.5, 4, 0, 0, 0]]
    _, res, d = resolve(rows, max_passes=2)
    assert len(res.passes) == 2
    assert res.status == TruncatedAtPassLimit(dropped_count=2, passes=2)
    assert not res.status.complete
    assert d.by_code(diag.PASS_LIMIT)


def test_note_before_start_of_song_stalls():
    _, res, d = resolve([[-1, 1, 0, 0, 0]])
    assert res.passes == []
    assert res.status == TruncatedAtPassLimit(dropped_count=1, passes=0)
    assert d.by_code(diag.STALLED)

import mido
import pytest

from conversion.converter import convert_chart
from conversion.events import ConversionResult, Lyric, Marker, NoteOff, NoteOn, PitchBend, SetTempo
from midi.writer import build_midi_file, event_to_message, write_midi


def _types(track):
    return [(m.type, m.time) for m in track]


def test_event_messages():
    assert event_to_message(NoteOn(60, 5)) == mido.Message('note_on', note=60, velocity=100, time=5)
    assert event_to_message(NoteOff(61, 7)) == mido.Message('note_off', note=61, velocity=0, time=7)
    assert event_to_message(PitchBend(-2048, 3)).pitch == -2048
    assert event_to_message(Marker("improv_start", 1)).type == 'text'
    assert event_to_message(Lyric("la", 1)).type == 'lyrics'
    assert event_to_message(SetTempo(500000)).tempo == 500000


def test_out_of_range_values_are_clamped():
    assert event_to_message(NoteOn(200, 0)).note == 127
    assert event_to_message(NoteOff(-3, 0)).note == 0
    assert event_to_message(PitchBend(9000, 0)).pitch == 8191


def test_unknown_event():
    with pytest.raises(TypeError):
        event_to_message(object())


def test_single_track_file_merges_tracks(make_chart):
    res = convert_chart(make_chart([[0, 1, 0, 0, 0]], lyrics=[{"bar": 0.5, "text": "ah"}]))
    mid = build_midi_file(res)
    assert mid.type == 0
    assert mid.ticks_per_beat == 960
    assert len(mid.tracks) == 1
    assert _types(mid.tracks[0]) == [
        ('set_tempo', 0), ('note_on', 0), ('lyrics', 480), ('note_off', 480), ('end_of_track', 0),
    ]


def test_multi_track_file(make_chart):
    res = convert_chart(make_chart([[0, 2, 0, 0, 0], [1, 1, 0, 0, 0]]))
    mid = build_midi_file(res, multi_track=True)
    assert mid.type == 1
    assert len(mid.tracks) == len(res.tracks)
    assert _types(mid.tracks[3]) == [('note_on', 960), ('note_off', 960)]


def test_write_and_read_back(tmp_path, make_chart):
    chart = make_chart([[0, 1, 6.875, 0, 6.875]], lyrics=[{"bar": 0, "text": "hello"}],
                       improv_zones=[[0, 1]])
    res = convert_chart(chart)
    path = tmp_path / "song.mid"
    write_midi(res, str(path), multi_track=True)

    mid = mido.MidiFile(str(path), charset="utf-8")
    assert mid.ticks_per_beat == 960
    msgs = [m for t in mid.tracks for m in t]
    assert [m.pitch for m in msgs if m.type == 'pitchwheel'] == [0, -2048]
    assert [m.note for m in msgs if m.type == 'note_on'] == [61]
    assert [m.text for m in msgs if m.type == 'lyrics'] == ["hello"]
    assert [m.text for m in msgs if m.type == 'text'] == ["improv_start", "improv_end"]


def test_single_track_round_trip_keeps_total_length(tmp_path, make_chart):
    res = convert_chart(make_chart([[0, 1, 0, 0, 13.75], [1, 1, 13.75, 0, 0]]))
    path = tmp_path / "slide.mid"
    write_midi(res, str(path))
    mid = mido.MidiFile(str(path))
    assert len(mid.tracks) == 1
    assert sum(m.time for m in mid.tracks[0]) == 1920


def test_empty_result():
    mid = build_midi_file(ConversionResult(960, tracks=[[SetTempo(500000)], [], [], []]))
    assert _types(mid.tracks[0]) == [('set_tempo', 0), ('end_of_track', 0)]

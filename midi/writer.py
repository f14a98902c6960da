# midi/writer.py
import logging
from typing import List

import mido

from conversion.events import (ConversionResult, Event, Lyric, Marker, NoteOff, NoteOn,
                               PitchBend, SetTempo, Track)

MIN_PITCHWHEEL, MAX_PITCHWHEEL = -8192, 8191
EVENT_TYPES = (NoteOn, NoteOff, PitchBend, Marker, Lyric, SetTempo)


def _clamp(value: int, lo: int, hi: int, what: str) -> int:
    if value < lo or value > hi:
        logging.warning("%s %d outside [%d, %d], clamping", what, value, lo, hi)
        return max(lo, min(hi, value))
    return value


def event_to_message(e: Event, velocity: int = 100):
    if not isinstance(e, EVENT_TYPES):
        raise TypeError(f"unsupported event: {e!r}")
    t = e.delta_ticks
    if isinstance(e, NoteOn):
        return mido.Message('note_on', note=_clamp(e.pitch, 0, 127, "Note"), velocity=velocity, time=t)
    if isinstance(e, NoteOff):
        return mido.Message('note_off', note=_clamp(e.pitch, 0, 127, "Note"), velocity=0, time=t)
    if isinstance(e, PitchBend):
        # mido keeps pitchwheel signed and adds the 8192 bias when encoding
        return mido.Message('pitchwheel', pitch=_clamp(e.value, MIN_PITCHWHEEL, MAX_PITCHWHEEL, "Pitch bend"), time=t)
    if isinstance(e, Marker):
        return mido.MetaMessage('text', text=e.text, time=t)
    if isinstance(e, Lyric):
        return mido.MetaMessage('lyrics', text=e.text, time=t)
    # SetTempo
    return mido.MetaMessage('set_tempo', tempo=e.microseconds_per_beat, time=t)


def track_to_midi(track: Track, velocity: int = 100) -> mido.MidiTrack:
    return mido.MidiTrack(event_to_message(e, velocity) for e in track)


def build_midi_file(result: ConversionResult, multi_track: bool = False,
                    velocity: int = 100, charset: str = "utf-8") -> mido.MidiFile:
    tracks: List[mido.MidiTrack] = [track_to_midi(t, velocity) for t in result.tracks]
    if multi_track:
        mid = mido.MidiFile(type=1, ticks_per_beat=result.ticks_per_quarter_note, charset=charset)
        mid.tracks.extend(tracks)
    else:
        # single-track file: everything merged in absolute time, ties keep track order
        mid = mido.MidiFile(type=0, ticks_per_beat=result.ticks_per_quarter_note, charset=charset)
        mid.tracks.append(mido.merge_tracks(tracks))
    return mid


def write_midi(result: ConversionResult, path: str, multi_track: bool = False,
               velocity: int = 100, charset: str = "utf-8") -> mido.MidiFile:
    logging.info("Building final MIDI")
    mid = build_midi_file(result, multi_track=multi_track, velocity=velocity, charset=charset)
    logging.info("Writing MIDI to file: %s (type %d, %d tracks)", path, mid.type, len(mid.tracks))
    mid.save(path)
    return mid

# conversion/converter.py
import logging
from typing import List, Optional

from chart.model import ChartData
from config import ConverterConfig
from conversion.aux_tracks import AuxiliaryTrackBuilder
from conversion.diagnostics import Diagnostics
from conversion.events import ConversionResult, SetTempo, Track
from conversion.notes import NoteEventBuilder
from conversion.passes import MAX_PASSES, OverlapResolver
from conversion.pitch import PitchMapper
from conversion.timing import TICKS_PER_QUARTER_NOTE, microseconds_per_beat


class ChartConverter:
    """Builds the full list of MIDI tracks for one chart.

    Track order: tempo, then a (notes, pitch bends) pair per note pass, then
    improv zones, lyrics and background cues. Auxiliary tracks are always
    present, empty when the chart has no such data.
    """

    def __init__(self, cfg: Optional[ConverterConfig] = None, max_passes: int = MAX_PASSES):
        self.cfg = cfg or ConverterConfig()
        self.max_passes = max_passes

    def convert(self, chart: ChartData) -> ConversionResult:
        tpqn = TICKS_PER_QUARTER_NOTE
        diagnostics = Diagnostics()

        tempo_track: Track = [SetTempo(microseconds_per_beat(chart.tempo))]

        builder = NoteEventBuilder(PitchMapper(self.cfg.pitch_bend_range), diagnostics, tpqn)
        resolved = OverlapResolver(builder, diagnostics, self.max_passes).resolve(chart.notes)

        aux = AuxiliaryTrackBuilder(diagnostics, tpqn)
        improv = aux.improv_zones(chart.improv_zones)
        lyrics = aux.lyrics(chart.lyrics)
        bg = aux.background(chart.bgdata, chart.tempo)

        tracks: List[Track] = [tempo_track]
        for p in resolved.passes:
            tracks.append(p.note_track)
            tracks.append(p.bend_track)
        tracks.extend([improv, lyrics, bg])

        logging.info("Conversion done: %d tracks, %d note passes, %d diagnostics",
                     len(tracks), len(resolved.passes), len(diagnostics))
        return ConversionResult(
            ticks_per_quarter_note=tpqn,
            tracks=tracks,
            diagnostics=list(diagnostics.records),
            status=resolved.status,
            note_passes=len(resolved.passes),
        )


def convert_chart(chart: ChartData, cfg: Optional[ConverterConfig] = None) -> ConversionResult:
    return ChartConverter(cfg).convert(chart)

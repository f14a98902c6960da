# app.py
import logging
from typing import List, Optional

from chart.loader import ChartLoadError, load_tmb
from chart.model import ChartData
from config import AppConfig
from conversion.converter import ChartConverter
from conversion.events import ConversionResult
from midi.writer import write_midi
from utils.crashlog import log_exception, set_context
from utils.path import default_output_path


class App:
    """Load one chart, then generate MIDI from it with the current settings."""

    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.chart: Optional[ChartData] = None
        self.chart_path: Optional[str] = None
        self.result: Optional[ConversionResult] = None
        self.status = ""

    # ---------- Loading ----------
    def load_chart(self, path: str) -> bool:
        try:
            chart = load_tmb(path)
        except ChartLoadError as e:
            logging.error("File failed to load: %s (%s)", path, e)
            log_exception("load_chart", e, chart=path)
            self.chart = None
            self.chart_path = None
            self.status = "Failed to load song data, see log for more info."
            return False

        self.chart = chart
        self.chart_path = path
        self.result = None
        self.status = "Song data successfully loaded."
        logging.info("File loaded: %s", path)
        set_context(chart=path, trackref=chart.trackref)
        return True

    def chart_info(self) -> List[str]:
        if self.chart is None:
            return []
        return [f"{k}: {v}" for k, v in self.chart.summary()]

    # ---------- Generate ----------
    def convert(self) -> ConversionResult:
        if self.chart is None:
            raise RuntimeError("Cannot generate MIDI: no song data loaded.")
        self.result = ChartConverter(self.cfg.convert).convert(self.chart)
        return self.result

    def generate_midi(self, out_path: Optional[str] = None) -> bool:
        if self.chart is None:
            self.status = "Cannot generate MIDI: no song data loaded."
            logging.error(self.status)
            return False

        filename = out_path or default_output_path(self.chart_path)
        logging.info("Attempting to generate MIDI for trackref: %s filename: %s",
                     self.chart.trackref, filename)
        try:
            result = self.convert()
            out = self.cfg.output
            write_midi(result, filename, multi_track=out.multi_track,
                       velocity=out.velocity, charset=out.charset)
        except (OSError, ValueError) as e:
            logging.error("Failed to generate MIDI. %s", filename, exc_info=True)
            log_exception("generate_midi", e, chart=self.chart_path,
                          trackref=self.chart.trackref, output=filename)
            self.status = "Failed to generate MIDI, see log for more info."
            return False

        logging.info("MIDI generated. %s", filename)
        self.status = "MIDI generated!"
        if not result.status.complete:
            self.status += f" ({result.status.dropped_count} notes dropped)"
        return True

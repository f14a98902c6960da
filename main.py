# main.py
import argparse
import logging
import os
import sys
from dataclasses import replace
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from app import App
from config import ConverterConfig, load_settings, save_settings
from utils.crashlog import log_dir, set_log_dir, setup_crashlog
from utils.path import settings_path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _init_logging(logs: str, verbose: bool = False):
    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        encoding="utf-8",
    )
    try:
        fh = RotatingFileHandler(os.path.join(logs, "tmb2midi.log"),
                                 maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
    except OSError:
        logging.warning("Cannot open log file in %s, logging to console only", logs)
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(fh)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("tmb2midi", description="Convert a Trombone Champ .tmb chart to MIDI")
    ap.add_argument("chart", help="Path to the .tmb chart")
    ap.add_argument("-o", "--output", help="Output .mid path (default: chart name with .mid)")
    ap.add_argument("--pitch-bend-range", type=int, default=None,
                    help="Semitones covered by a full pitch bend (default from settings, 2)")
    ap.add_argument("--multi-track", action="store_true", default=None,
                    help="Write one MIDI track per converted track instead of a single merged track")
    ap.add_argument("--settings", default=None, help="Settings JSON path")
    ap.add_argument("--save-settings", action="store_true",
                    help="Store the effective settings back to the settings file")
    ap.add_argument("--info", action="store_true", help="Only print chart info, don't convert")
    ap.add_argument("--log-dir", default=None, help="Directory for log and error report files")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None, crashlog: bool = False) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.log_dir:
        set_log_dir(args.log_dir)
    if crashlog:
        setup_crashlog()
    _init_logging(log_dir(), args.verbose)

    settings_file = args.settings or settings_path()
    try:
        cfg = load_settings(settings_file)
        if args.pitch_bend_range is not None:
            cfg.convert = ConverterConfig(pitch_bend_range=args.pitch_bend_range)
        if args.multi_track:
            cfg.output = replace(cfg.output, multi_track=True)
    except (OSError, ValueError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2

    if args.save_settings:
        save_settings(cfg, settings_file)

    app = App(cfg)
    if not app.load_chart(args.chart):
        print(app.status, file=sys.stderr)
        return 1

    for line in app.chart_info():
        print(line)
    if args.info:
        return 0

    ok = app.generate_midi(args.output)
    print(app.status)
    if not ok:
        return 1

    res = app.result
    print(f"{len(res.tracks)} tracks, {res.note_passes} note passes, {len(res.diagnostics)} warnings")
    return 0


def run():
    sys.exit(main(crashlog=True))


if __name__ == '__main__':
    run()

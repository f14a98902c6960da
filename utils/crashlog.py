# utils/crashlog.py
import os, sys, faulthandler, datetime, traceback
from typing import Dict, Optional

_fault_file = None
_log_dir: Optional[str] = None
_context: Dict[str, object] = {}


def log_dir(base: Optional[str] = None) -> str:
    """logs/ next to the working directory unless set_log_dir() picked another one."""
    d = base or _log_dir or os.path.join(os.getcwd(), "logs")
    os.makedirs(d, exist_ok=True)
    return d


def set_log_dir(path: str):
    global _log_dir
    _log_dir = path


def _new_log_path(prefix: str = "crash") -> str:
    stamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    return os.path.join(log_dir(), f"{prefix}-{stamp}.txt")


def setup_crashlog():
    """Send native faults and uncaught exceptions to report files under log_dir()."""
    global _fault_file
    try:
        if _fault_file is None:
            _fault_file = open(_new_log_path("native"), "w", encoding="utf-8")
        faulthandler.enable(_fault_file)
    except OSError:
        _fault_file = None

    def _hook(exc_type, exc, tb):
        try:
            _write_report("crash", "UNCAUGHT EXCEPTION", _context, exc_type, exc, tb)
        finally:
            sys.__excepthook__(exc_type, exc, tb)
    sys.excepthook = _hook


def set_context(**fields):
    """Remember what is being converted (chart, stage) for crash reports."""
    _context.update({k: v for k, v in fields.items() if v is not None})


def _write_report(prefix: str, header: str, context: Dict[str, object],
                  exc_type, exc, tb) -> str:
    path = _new_log_path(prefix)
    with open(path, "w", encoding="utf-8") as out:
        out.write(header + "\n")
        for key in sorted(context):
            out.write(f"{key}: {context[key]}\n")
        out.write("=" * 60 + "\n")
        out.write("".join(traceback.format_exception(exc_type, exc, tb)))
    return path


def log_exception(stage: str, exc: BaseException, **context) -> str:
    """Write an error report for a handled conversion failure and return its path."""
    fields = dict(_context)
    fields.update({k: v for k, v in context.items() if v is not None})
    fields["stage"] = stage
    return _write_report("error", f"{type(exc).__name__}: {exc}", fields,
                         type(exc), exc, exc.__traceback__)

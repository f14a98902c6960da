# utils/path.py
import os


def default_output_path(chart_path: str) -> str:
    """song.tmb -> song.mid, next to the chart."""
    root, _ = os.path.splitext(chart_path)
    return root + ".mid"


def settings_path() -> str:
    """
    使用者設定檔位置；可用 TMB2MIDI_SETTINGS 環境變數覆寫。
    """
    env = os.environ.get("TMB2MIDI_SETTINGS")
    if env:
        return env
    return os.path.join(os.path.expanduser("~"), ".tmb2midi", "settings.json")

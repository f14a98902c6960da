import pytest

from chart.loader import parse_tmb
from utils import crashlog


@pytest.fixture(autouse=True)
def _logs_in_tmp(tmp_path, monkeypatch):
    # keep error reports out of the working directory
    monkeypatch.setattr(crashlog, "_log_dir", str(tmp_path / "logs"))
    monkeypatch.setattr(crashlog, "_context", {})


@pytest.fixture
def make_chart():
    def _make(notes=None, tempo=120, **extra):
        obj = {"name": "Test Song", "shortName": "Test", "trackref": "test", "tempo": tempo}
        if notes is not None:
            obj["notes"] = notes
        obj.update(extra)
        return parse_tmb(obj)
    return _make

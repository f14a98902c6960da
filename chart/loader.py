# chart/loader.py
import json
import logging
from typing import Any, List, Optional

from chart.model import BackgroundCue, ChartData, ImprovZone, LyricEntry, Note


class ChartLoadError(Exception):
    """Raised when a chart file can't be read or doesn't look like a .tmb chart."""


def _rows(obj: dict, key: str) -> List[Any]:
    # 缺少或為 null 的欄位一律視為空列表
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ChartLoadError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def parse_tmb(obj: Any) -> ChartData:
    if not isinstance(obj, dict):
        raise ChartLoadError("chart root must be a JSON object")

    try:
        tempo = float(obj["tempo"])
    except KeyError:
        raise ChartLoadError("chart has no tempo") from None
    except (TypeError, ValueError) as e:
        raise ChartLoadError(f"invalid tempo: {obj.get('tempo')!r}") from e

    try:
        notes = []
        for i, row in enumerate(_rows(obj, "notes")):
            if len(row) < 5:
                raise ChartLoadError(f"notes[{i}] has {len(row)} values, expected 5")
            notes.append(Note.from_row(row))
        zones = [ImprovZone(float(z[0]), float(z[1])) for z in _rows(obj, "improv_zones")]
        lyrics = [LyricEntry(float(l["bar"]), str(l["text"])) for l in _rows(obj, "lyrics")]
        bgdata = [BackgroundCue(float(b[0]), float(b[1])) for b in _rows(obj, "bgdata")]
    except ChartLoadError:
        raise
    except (TypeError, ValueError, KeyError, IndexError) as e:
        raise ChartLoadError(f"malformed chart data: {e}") from e

    return ChartData(
        tempo=tempo,
        name=str(obj.get("name") or ""),
        short_name=str(obj.get("shortName") or ""),
        trackref=str(obj.get("trackref") or ""),
        notes=notes,
        improv_zones=zones,
        lyrics=lyrics,
        bgdata=bgdata,
    )


def load_tmb(path: str, encoding: Optional[str] = "utf-8-sig") -> ChartData:
    logging.info("Attempting to load chart: %s", path)
    try:
        with open(path, "r", encoding=encoding) as f:
            obj = json.load(f)
    except OSError as e:
        raise ChartLoadError(f"cannot read {path}: {e}") from e
    except ValueError as e:
        raise ChartLoadError(f"{path} is not valid JSON: {e}") from e

    chart = parse_tmb(obj)
    logging.info("Chart loaded: trackref=%s name=%s tempo=%g notes=%d",
                 chart.trackref, chart.name, chart.tempo, len(chart.notes))
    return chart

# ========================= config.py =========================
import json
import logging
import os
from dataclasses import asdict, dataclass, field


@dataclass
class ConverterConfig:
    pitch_bend_range: int = 2   # semitones covered by a full pitch bend

    def __post_init__(self):
        if int(self.pitch_bend_range) < 1:
            raise ValueError(f"pitch_bend_range must be >= 1, got {self.pitch_bend_range!r}")
        self.pitch_bend_range = int(self.pitch_bend_range)


@dataclass
class OutputConfig:
    multi_track: bool = False   # False = single-track (type 0) file, tracks merged
    velocity: int = 100
    charset: str = "utf-8"      # encoding of lyric/marker text


@dataclass
class AppConfig:
    convert: ConverterConfig = field(default_factory=ConverterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def serialize_settings(cfg: AppConfig) -> dict:
    return asdict(cfg)


def deserialize_settings(obj: dict) -> AppConfig:
    """Rebuild an AppConfig from saved JSON; unknown keys are ignored."""
    def pick(cls, section):
        raw = obj.get(section) or {}
        known = {k: v for k, v in raw.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    return AppConfig(
        convert=pick(ConverterConfig, "convert"),
        output=pick(OutputConfig, "output"),
    )


def load_settings(path: str) -> AppConfig:
    if not os.path.exists(path):
        logging.info("No settings file at %s, using defaults", path)
        return AppConfig()
    with open(path, "r", encoding="utf-8") as f:
        obj = json.load(f)
    if not isinstance(obj, dict):
        raise ValueError(f"settings file {path} must contain a JSON object")
    return deserialize_settings(obj)


def save_settings(cfg: AppConfig, path: str):
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_settings(cfg), f, ensure_ascii=False, indent=2)
    logging.info("Settings saved to %s", path)

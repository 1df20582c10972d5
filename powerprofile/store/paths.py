from __future__ import annotations

from datetime import date
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "powerprofile"


def get_config_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "config.toml"


def get_data_dir() -> Path:
    return Path(user_data_dir(APP_NAME))


def get_logs_dir() -> Path:
    return get_data_dir() / "logs"


def event_log_path(day: date, base_dir: Path | None = None) -> Path:
    return (base_dir or get_logs_dir()) / f"{day.isoformat()}_{APP_NAME}.log"

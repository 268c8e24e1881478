from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from prayer_timer.core.timer import clamp_minutes
from prayer_timer.data.storage import Storage


DB_PATH_ENV = "PRAYER_TIMER_DB"
LOG_LEVEL_ENV = "PRAYER_TIMER_LOG_LEVEL"
SETTINGS_KEY = "settings"


@dataclass
class AppConfig:
    default_minutes: int = 15
    reminder_title: str = "Prayer/Study Finished"
    reminder_body: str = "Your prayer/study timer has completed."
    attention_interval_ms: int = 1500
    wellness_enabled: bool = True


def default_db_path() -> Path:
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / "app.db"


def log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "INFO").upper()


def load_config(storage: Storage) -> AppConfig:
    raw = storage.get_setting(SETTINGS_KEY, {})
    if not isinstance(raw, dict):
        raw = {}
    defaults = AppConfig()
    values: dict[str, Any] = {}
    for field in fields(AppConfig):
        default = getattr(defaults, field.name)
        value = raw.get(field.name, default)
        # bool is an int subclass; keep the two apart
        if type(value) is not type(default):
            value = default
        values[field.name] = value
    config = AppConfig(**values)
    config.default_minutes = clamp_minutes(config.default_minutes)
    if config.attention_interval_ms <= 0:
        config.attention_interval_ms = defaults.attention_interval_ms
    return config


def save_config(storage: Storage, config: AppConfig) -> None:
    storage.set_setting(SETTINGS_KEY, asdict(config))

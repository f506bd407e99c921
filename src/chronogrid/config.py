"""Configuration management for chronogrid."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.grid import TimeGridMapper
from .core.recurrence import DEFAULT_OCCURRENCE_CAP

logger = logging.getLogger(__name__)

CHRONOGRID_HOME = Path(os.environ.get("CHRONOGRID_HOME", Path.home() / "chronogrid"))
CONFIG_FILE = CHRONOGRID_HOME / "config" / "chronogrid.conf"
DATA_DIR = CHRONOGRID_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """chronogrid configuration."""

    # Grid geometry
    row_height_px: int = 64
    start_hour: int = 0
    end_hour: int = 24
    min_event_height: int = 20
    week_starts_on: int = 1
    # Interaction toggles
    enable_drag_and_drop: bool = True
    enable_resize: bool = True
    # Recurrence
    occurrence_cap: int = DEFAULT_OCCURRENCE_CAP
    # Overdue tracking
    soft_deadline_offset: int = 3
    hard_deadline_offset: int = 7
    enable_notifications: bool = True
    notification_threshold: int = 1
    refresh_interval_seconds: int = 60
    # Persistence
    api_base_url: str = ""
    api_token: str = ""
    data_file: str = ""

    def grid(self) -> TimeGridMapper:
        """Time grid matching the configured geometry."""
        return TimeGridMapper(
            row_height_px=self.row_height_px,
            start_hour=self.start_hour,
            end_hour=self.end_hour,
        )

    def data_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "calendar.json"


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, keeping {default}")
        return default


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, keeping {default}")
    return default


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _validate(config: Config) -> Config:
    defaults = Config()
    if config.row_height_px <= 0:
        logger.warning(f"ROW_HEIGHT_PX must be positive, using {defaults.row_height_px}")
        config.row_height_px = defaults.row_height_px
    if not 0 <= config.start_hour < config.end_hour <= 24:
        logger.warning(
            f"Invalid visible hours {config.start_hour}-{config.end_hour}, using 0-24"
        )
        config.start_hour, config.end_hour = 0, 24
    if config.week_starts_on not in (0, 1):
        logger.warning(f"WEEK_STARTS_ON must be 0 or 1, using {defaults.week_starts_on}")
        config.week_starts_on = defaults.week_starts_on
    return config


def load_config(config_file: Path | None = None) -> Config:
    """
    Load configuration from chronogrid.conf.

    Read on every call, so edits to the file apply to the next operation.
    """
    config_file = config_file or CONFIG_FILE
    config = Config()

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case (
                "row_height_px"
                | "start_hour"
                | "end_hour"
                | "min_event_height"
                | "week_starts_on"
                | "occurrence_cap"
                | "soft_deadline_offset"
                | "hard_deadline_offset"
                | "notification_threshold"
                | "refresh_interval_seconds"
            ):
                setattr(config, key, _parse_int(key, value, getattr(config, key)))
            case "enable_drag_and_drop" | "enable_resize" | "enable_notifications":
                setattr(config, key, _parse_bool(key, value, getattr(config, key)))
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "api_token":
                config.api_token = value
            case "data_file":
                config.data_file = value

    return _validate(config)

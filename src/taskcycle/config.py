"""Configuration management for taskcycle."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.occurrences import ALL_CATEGORIES, RecurrenceFilter

logger = logging.getLogger(__name__)

TASKCYCLE_HOME = Path(os.environ.get("TASKCYCLE_HOME", Path.home() / "taskcycle"))
CONFIG_FILE = TASKCYCLE_HOME / "config" / "taskcycle.conf"
DATA_DIR = TASKCYCLE_HOME / "data"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """taskcycle configuration."""

    data_file: str = ""
    categories: list[str] = field(default_factory=lambda: ["Personal", "Work", "Fitness", "Hobbies"])
    default_category: str = "Personal"
    filter_categories: list[str] = field(default_factory=lambda: [ALL_CATEGORIES])
    recurrence_filter: RecurrenceFilter = RecurrenceFilter.ALL
    show_completed: bool = False
    log_level: str = "WARNING"

    @property
    def data_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "tasks.json"


def _split_list(value: str) -> list[str]:
    return [c.strip() for c in value.split(",") if c.strip()]


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from taskcycle.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

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
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "data_file":
                config.data_file = value
            case "categories":
                config.categories = _split_list(value) or config.categories
            case "default_category":
                config.default_category = value or config.default_category
            case "filter_categories":
                config.filter_categories = _split_list(value) or [ALL_CATEGORIES]
            case "recurrence_filter":
                mode = RecurrenceFilter.parse(value)
                if mode is RecurrenceFilter.ALL and value.strip().lower() != "all":
                    logger.warning(f"Unknown RECURRENCE_FILTER {value!r}, showing all tasks")
                config.recurrence_filter = mode
            case "show_completed":
                parsed = _parse_bool(value)
                if parsed is None:
                    logger.warning(f"Invalid SHOW_COMPLETED value {value!r}, using false")
                    parsed = False
                config.show_completed = parsed
            case "log_level":
                level = value.upper()
                if level in LOG_LEVELS:
                    config.log_level = level
                else:
                    logger.warning(f"Invalid LOG_LEVEL {value!r}, using {config.log_level}")

    return config

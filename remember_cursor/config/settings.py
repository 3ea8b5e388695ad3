"""
Settings for remember-cursor.

Settings are stored next to the position database in
<root>/.remember-cursor/data.json using camelCase keys.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..exceptions import ConfigurationError
from .constants import (
    DEFAULT_DB_FILE_NAME,
    DEFAULT_DELAY_AFTER_FILE_OPENING_MS,
    MAX_DELAY_AFTER_FILE_OPENING_MS,
    MIN_DELAY_AFTER_FILE_OPENING_MS,
    SAFE_DB_FLUSH_INTERVAL_MS,
    SETTINGS_FILE_NAME,
)

logger = logging.getLogger(__name__)

# Maps the on-disk keys to Settings attributes
SETTING_KEYS: dict[str, str] = {
    "dbFileName": "db_file_name",
    "delayAfterFileOpening": "delay_after_file_opening",
    "saveTimer": "save_timer",
}


@dataclass
class Settings:
    """User-tunable settings."""

    db_file_name: str = DEFAULT_DB_FILE_NAME
    delay_after_file_opening: int = DEFAULT_DELAY_AFTER_FILE_OPENING_MS
    save_timer: int = SAFE_DB_FLUSH_INTERVAL_MS

    def __post_init__(self) -> None:
        self.delay_after_file_opening = min(
            max(int(self.delay_after_file_opening), MIN_DELAY_AFTER_FILE_OPENING_MS),
            MAX_DELAY_AFTER_FILE_OPENING_MS,
        )
        # Flushing more often than this only causes write amplification
        self.save_timer = max(int(self.save_timer), SAFE_DB_FLUSH_INTERVAL_MS)

    @property
    def delay_after_file_opening_seconds(self) -> float:
        return self.delay_after_file_opening / 1000

    @property
    def save_timer_seconds(self) -> float:
        return self.save_timer / 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Build settings from a data file dict, ignoring unknown keys."""
        kwargs: dict[str, Any] = {}
        for key, attr in SETTING_KEYS.items():
            if key in data and data[key] is not None:
                kwargs[attr] = data[key]
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise ConfigurationError("Invalid settings data", error=str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in SETTING_KEYS.items()}

    def with_value(self, key: str, value: str) -> Settings:
        """Return a copy with one setting changed from its string form.

        Raises:
            ConfigurationError: If the key is unknown or the value can't be parsed.
        """
        if key not in SETTING_KEYS:
            raise ConfigurationError(
                f"Unknown setting '{key}'", valid_keys=sorted(SETTING_KEYS)
            )
        data = self.to_dict()
        if key == "dbFileName":
            if not value.strip():
                raise ConfigurationError("dbFileName must not be empty")
            data[key] = value
        else:
            try:
                data[key] = int(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Setting '{key}' expects an integer", value=value
                ) from e
        return Settings.from_dict(data)


def get_settings_path(root: Path) -> Path:
    """Path of the settings file for a workspace root."""
    return root / SETTINGS_FILE_NAME


def load_settings(root: Path) -> Settings:
    """
    Load settings for a workspace root.

    Returns:
        Settings merged over the defaults, or the defaults if the file
        doesn't exist or is invalid
    """
    path = get_settings_path(root)
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ConfigurationError("Settings file is not a JSON object", path=str(path))
        return Settings.from_dict(data)
    except (json.JSONDecodeError, OSError, ConfigurationError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        return Settings()


def save_settings(root: Path, settings: Settings) -> None:
    """
    Save settings for a workspace root.

    Raises:
        ConfigurationError: If the file can't be written
    """
    path = get_settings_path(root)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError("Failed to save settings", path=str(path)) from e

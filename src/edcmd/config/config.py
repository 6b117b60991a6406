"""
Configuration management for edcmd.

Provides a configuration file at ~/.edcmd/config.json for default settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Default values - single source of truth
DEFAULTS = {
    "invalid_input_delay": 2.0,
    "ring_bell": True,
    "log_level": "WARNING",
}


class Config(BaseModel):
    """Configuration settings for edcmd.

    All settings are optional. Use DEFAULTS for default values.
    """

    model_config = {"extra": "ignore"}  # Ignore unknown fields like _comment

    # Minibuffer settings
    invalid_input_delay: Optional[float] = Field(
        default=None,
        ge=0,
        description="Seconds to show an invalid-input error before editing resumes"
    )
    ring_bell: Optional[bool] = Field(
        default=None,
        description="Ring the terminal bell on errors"
    )

    # Logging settings
    log_level: Optional[str] = Field(
        default=None,
        description="Log level for the edcmd logger (DEBUG, INFO, WARNING, ...)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Write logs to this file instead of stderr"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value with fallback to DEFAULTS, then to provided default."""
        value = getattr(self, key, None)
        if value is not None:
            return value
        return DEFAULTS.get(key, default)


class ConfigManager:
    """Reads and writes ~/.edcmd/config.json.

    The file may hold keys this version does not know (comments, settings
    of other tools); they are left untouched on save.
    """

    CONFIG_DIR = Path.home() / ".edcmd"
    CONFIG_FILE = CONFIG_DIR / "config.json"

    def __init__(self):
        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """The current config, read from disk on first use."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def _read_raw(self) -> dict[str, Any]:
        """The config file as a dict; empty if missing or not a JSON object."""
        if not self.CONFIG_FILE.exists():
            return {}
        try:
            data = json.loads(self.CONFIG_FILE.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in {self.CONFIG_FILE}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_raw(self, data: dict[str, Any]) -> Path:
        self.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        self.CONFIG_FILE.write_text(json.dumps(data, indent=2) + "\n")
        logger.debug(f"Wrote {self.CONFIG_FILE}")
        return self.CONFIG_FILE

    def load(self) -> Config:
        """Read the config file.

        A missing file, bad JSON or values that fail validation all give the
        default (empty) Config.
        """
        data = self._read_raw()
        try:
            return Config.model_validate(data)
        except ValueError as e:
            logger.warning(f"Invalid config in {self.CONFIG_FILE} ({e}), using defaults")
            return Config()

    def save(self, config: Optional[Config] = None) -> Path:
        """Write the set (non-None) values of `config`, or of the current config.

        Returns:
            Path to the config file.
        """
        if config is not None:
            self._config = config
        data = self._read_raw()
        data.update(self.config.model_dump(exclude_none=True))
        return self._write_raw(data)

    def _check_key(self, key: str) -> None:
        if key not in Config.model_fields:
            raise ValueError(f"Unknown config key: {key}")

    def set(self, key: str, value: Any) -> None:
        """Validate and persist one setting.

        Raises:
            ValueError: Unknown key, or a value the Config model rejects.
        """
        self._check_key(key)
        data = self.load().model_dump()
        data[key] = value
        self._config = Config.model_validate(data)
        self.save()

    def unset(self, key: str) -> None:
        """Drop a setting so its default applies again."""
        self._check_key(key)
        self._config = self.load().model_copy(update={key: None})
        data = self._read_raw()
        if data.pop(key, None) is not None:
            self._write_raw(data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def reset(self) -> None:
        """Forget every setting and delete the config file."""
        self._config = Config()
        self.CONFIG_FILE.unlink(missing_ok=True)


# Singleton instance
_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the singleton ConfigManager instance."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def get_config() -> Config:
    return get_config_manager().config

"""Configuration service for taskchat.

This module provides the ConfigService class, the single source of truth for
engine configuration. It handles:

- Loading and saving config.json under the platform config directory
- Creating the default configuration on first run
- Reading and updating single values by dot-separated key
- Resetting to defaults

The loaded AppConfig is treated as read-only by the query engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel

from taskchat.models.config_models import AppConfig

_APP_NAME = "taskchat"
_UNSET = object()


def _child(node: Any, key: str) -> Any:
    if isinstance(node, BaseModel):
        if key in type(node).model_fields:
            return getattr(node, key)
        return _UNSET
    if isinstance(node, Mapping):
        if key in node:
            return node[key]
        if key.lstrip("-").isdigit() and int(key) in node:
            return node[int(key)]
    return _UNSET


def lookup(node: Any, key: str) -> Any:
    """Walk a dot-separated key through models and dicts.

    Raises:
        KeyError: If any part of the key does not exist
    """
    for part in key.split("."):
        node = _child(node, part)
        if node is _UNSET:
            raise KeyError(key)
    return node


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config

    def get_value(self, key: str) -> Any:
        """Get a configuration value by dot-separated key (e.g. backend.preference)."""
        return lookup(self.config, key)

    def set_value(self, key: str, value: Any) -> AppConfig:
        """Set a configuration value by dot-separated key and save.

        The whole configuration is validated again, so an invalid value raises
        pydantic's ValidationError and nothing is written.
        """
        lookup(self.config, key)
        data = self.config.model_dump()
        *parents, last = key.split(".")
        node = data
        for part in parents:
            node = node[part if part in node else int(part)]
        node[last if last in node else int(last)] = value

        self._config = AppConfig.model_validate(data)
        self.save_config()
        return self._config

    def reset_value(self, key: str) -> AppConfig:
        """Reset one key to its default value."""
        return self.set_value(key, lookup(AppConfig(), key))


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

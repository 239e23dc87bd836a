"""Configuration manager for MapMeasure.

Settings live in one JSON file, grouped as in ``DEFAULT_CONFIG``.
Values found on disk override the shipped defaults key by key; keys
missing from the file keep their default.
"""

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger
from platformdirs import user_config_dir

from mapmeasure.config.defaults import DEFAULT_CONFIG


class ConfigManager:
    """Grouped settings backed by a JSON file."""

    CONFIG_FILENAME = "mapmeasure_config.json"

    def __init__(self, config_dir: str | Path | None = None):
        if config_dir is None:
            config_dir = user_config_dir("MapMeasure", "MapMeasure")
        self._config_path = Path(config_dir) / self.CONFIG_FILENAME
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(DEFAULT_CONFIG)

    @classmethod
    def from_defaults(cls) -> "ConfigManager":
        """In-memory manager holding only the shipped defaults; never touches disk."""
        return cls()

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(self):
        """Reload from disk, layering stored values over the defaults."""
        self._data = copy.deepcopy(DEFAULT_CONFIG)
        if not self._config_path.exists():
            logger.info("No config file found, using defaults.")
            return

        try:
            stored = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable config {self._config_path}, using defaults: {e}")
            return

        for group, values in stored.items():
            if isinstance(values, dict):
                self._data.setdefault(group, {}).update(values)
        logger.info(f"Configuration loaded from {self._config_path}")

    def save(self):
        """Write every group to disk."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        logger.info(f"Configuration saved to {self._config_path}")

    def get(self, group: str, key: str, default: Any = None) -> Any:
        return self._data.get(group, {}).get(key, default)

    def set(self, group: str, key: str, value: Any):
        self._data.setdefault(group, {})[key] = value

"""Configuration management for whimsy."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .compound import DEFAULT_DELIMITER, DEFAULT_PARTS, DEFAULT_RANDOM
from .paths import DEFAULT_MANIFEST


GLOBAL_CONFIG_PATH = Path.home() / ".whimsy.yaml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """whimsy settings with hierarchical lookup.

    Lookup order (higher priority first):
    1. Project config (.whimsy/config)
    2. Global config (~/.whimsy.yaml)
    3. Built-in defaults

    Writes always go to the file the instance was opened on.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        enable_hierarchy: bool = True,
        global_path: Optional[Path] = None,
    ):
        """Initialize config.

        Args:
            config_path: File to read and write. Defaults to the global config.
            enable_hierarchy: Fall back to the global config for missing keys.
            global_path: Override the global config location (tests).
        """
        self.global_path = global_path or GLOBAL_CONFIG_PATH
        self.config_path = config_path or self.global_path
        self.enable_hierarchy = enable_hierarchy
        self._data: Dict[str, Any] = {}
        self._global_data: Dict[str, Any] = {}
        self.load()

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError("top level must be a mapping")
        return loaded

    def load(self) -> None:
        """Load configuration from file(s)."""
        if self.config_path.exists():
            try:
                self._data = self._read(self.config_path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise RuntimeError(f"Failed to load config from {self.config_path}: {e}") from e
        else:
            self._data = {}

        self._global_data = {}
        if self.enable_hierarchy and self.config_path != self.global_path and self.global_path.exists():
            try:
                self._global_data = self._read(self.global_path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise RuntimeError(f"Failed to load config from {self.global_path}: {e}") from e

    def save(self) -> None:
        """Save configuration to the primary config file."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as f:
                yaml.safe_dump(self._data, f, default_flow_style=False)
        except OSError as e:
            raise RuntimeError(f"Failed to save config to {self.config_path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Project value, then global value, then ``default``."""
        if key in self._data:
            return self._data[key]
        if key in self._global_data:
            return self._global_data[key]
        return default

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    @property
    def default_parts(self) -> List[str]:
        parts = self.get("default_parts", list(DEFAULT_PARTS))
        if isinstance(parts, str):
            parts = [p.strip() for p in parts.split(",") if p.strip()]
        return list(parts)

    @default_parts.setter
    def default_parts(self, value: List[str]) -> None:
        self.set("default_parts", list(value))

    @property
    def default_delimiter(self) -> str:
        return str(self.get("default_delimiter", DEFAULT_DELIMITER))

    @default_delimiter.setter
    def default_delimiter(self, value: str) -> None:
        self.set("default_delimiter", value)

    @property
    def default_random(self) -> bool:
        value = self.get("default_random", DEFAULT_RANDOM)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    @default_random.setter
    def default_random(self, value: bool) -> None:
        self.set("default_random", bool(value))

    @property
    def log_level(self) -> str:
        level = str(self.get("log_level", "WARNING")).upper()
        return level if level in LOG_LEVELS else "WARNING"

    @log_level.setter
    def log_level(self, value: str) -> None:
        self.set("log_level", value.upper())

    @property
    def manifest(self) -> str:
        return str(self.get("manifest", DEFAULT_MANIFEST))

    @manifest.setter
    def manifest(self, value: str) -> None:
        self.set("manifest", value)

    def name_defaults(self) -> Dict[str, Any]:
        """Defaults for compound name attributes, keyed like the resource schema."""
        return {
            "parts": self.default_parts,
            "delimiter": self.default_delimiter,
            "random": self.default_random,
        }

    @classmethod
    def load_with_project_context(cls, start_path: Optional[Path] = None, global_path: Optional[Path] = None) -> Config:
        """Project config with global fallback when inside a project, else global only.

        Args:
            start_path: Starting directory for the project search
        """
        from .paths import get_project_config_path

        project_config_path = get_project_config_path(start_path)
        if project_config_path:
            return cls(config_path=project_config_path, enable_hierarchy=True, global_path=global_path)
        return cls(config_path=global_path or GLOBAL_CONFIG_PATH, enable_hierarchy=False, global_path=global_path)

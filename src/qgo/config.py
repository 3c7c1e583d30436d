"""Configuration for selector display settings."""

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger("qgo.config")

# Module-level cache for singleton pattern
_config_cache: "Config | None" = None


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing or config reload."""
    global _config_cache
    _config_cache = None


def get_default_config_dir() -> Path:
    """Get default config directory, respecting QGO_CONFIG_DIR env var."""
    config_dir = os.environ.get("QGO_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".config" / "qgo"


class ConfigMeta:
    """Schema definition - separate from runtime state."""

    SETTINGS: dict[str, str] = {
        "cursor_marker": "Marker drawn in front of the highlighted option",
        "show_hints": "Show key hints above multi-select lists",
    }


class Config:
    """Runtime configuration with env override support."""

    DEFAULTS: dict[str, Any] = {
        "cursor_marker": "> ",
        "show_hints": True,
    }

    def __init__(self, config_dir: Path | None = None):
        self._config_dir = config_dir or get_default_config_dir()
        self._config_file = self._config_dir / "config.json"
        self._data: dict[str, Any] = {}

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Factory method - explicit loading with caching."""
        global _config_cache

        if _config_cache is not None and config_dir is None:
            return _config_cache

        config = cls(config_dir)
        config._load_from_file()
        config._apply_env_overrides()

        if config_dir is None:
            _config_cache = config

        return config

    def __getattr__(self, name: str) -> Any:
        """Access config values as attributes."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        if name in self.DEFAULTS:
            return self.DEFAULTS[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    def get_settings(self) -> list[tuple[str, str, Any]]:
        """Return (key, description, value) for every known setting."""
        return [(name, desc, getattr(self, name)) for name, desc in ConfigMeta.SETTINGS.items()]

    def set(self, key: str, value: Any) -> None:
        """Set value and persist.

        Unknown keys raise KeyError, values the selectors cannot use raise
        ValueError.
        """
        if key not in self.DEFAULTS:
            raise KeyError(key)
        if isinstance(value, str):
            value = self._coerce(value, type(self.DEFAULTS[key]))
        if not self._is_valid(key, value):
            raise ValueError(f"Invalid value for {key}: {value!r}")
        self._data[key] = value
        self._save()

    def _load_from_file(self) -> None:
        if self._config_file.exists():
            try:
                content = self._config_file.read_text()
                if content.strip():
                    self._data = json.loads(content)
                if not isinstance(self._data, dict):
                    raise json.JSONDecodeError("expected an object", content, 0)
            except json.JSONDecodeError:
                # Corrupted config - use defaults, will be fixed on next save
                logger.warning("Ignoring corrupted config file %s", self._config_file)
                self._data = {}
        self._drop_invalid(str(self._config_file))

    def _save(self) -> None:
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._config_file.write_text(json.dumps(self._data, indent=2))

    def _apply_env_overrides(self) -> None:
        """Apply QGO_* env vars (highest priority)."""
        for key, default in self.DEFAULTS.items():
            env_key = f"QGO_{key.upper()}"
            if env_key not in os.environ:
                continue
            value = self._coerce(os.environ[env_key], type(default))
            if self._is_valid(key, value):
                self._data[key] = value
            else:
                logger.warning("Ignoring invalid %s from %s: %r", key, env_key, value)

    def _drop_invalid(self, origin: str) -> None:
        for key in list(self._data):
            if key in self.DEFAULTS and not self._is_valid(key, self._data[key]):
                logger.warning("Ignoring invalid %s from %s: %r", key, origin, self._data[key])
                del self._data[key]

    @classmethod
    def _is_valid(cls, key: str, value: Any) -> bool:
        if type(value) is not type(cls.DEFAULTS[key]):
            return False
        if key == "cursor_marker":
            return bool(value)
        return True

    @staticmethod
    def _coerce(value: str, target_type: type) -> Any:
        """Coerce string value to target type."""
        if target_type is bool:
            return value.lower() in ("true", "1", "yes")
        if target_type is int:
            return int(value)
        return value

"""Persisted scan defaults backed by a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from longpath.core.errors import ConfigError
from longpath.models.scan_config import DEFAULT_THRESHOLD
from longpath.utils import parse_bool, xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "longpath"
_SETTINGS_FILE = "settings.json"

# Short names accepted by ``longpath config set`` -> dot-notation keys.
KEYS = {
    "threshold": "scan.threshold",
    "include_dirs": "scan.include_dirs",
}


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("scan.threshold")       # reads data["scan"]["threshold"]
        settings.set("scan.threshold", 200)  # writes + saves

    Unreadable or malformed files are ignored with a warning so a broken
    settings file never prevents a scan.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_settings_path()
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def threshold(self) -> int:
        value = self.get("scan.threshold", DEFAULT_THRESHOLD)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            log.warning("Ignoring invalid threshold %r in %s", value, self.path)
            return DEFAULT_THRESHOLD
        return value

    @property
    def include_dirs(self) -> bool:
        value = self.get("scan.include_dirs", True)
        if not isinstance(value, bool):
            log.warning("Ignoring invalid include_dirs %r in %s", value, self.path)
            return True
        return value

    def as_dict(self) -> dict[str, Any]:
        return {"threshold": self.threshold, "include_dirs": self.include_dirs}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def update(self, name: str, raw: str) -> Any:
        """Validate a user-supplied value for a short key name and store it.

        Raises:
            ConfigError: Unknown key or invalid value.
        """
        if name not in KEYS:
            raise ConfigError(f"Unknown setting '{name}' (choose from: {', '.join(KEYS)})")
        try:
            if name == "threshold":
                value: Any = int(raw)
                if value < 1:
                    raise ValueError(raw)
            else:
                value = parse_bool(raw)
        except ValueError:
            raise ConfigError(f"Invalid value for {name}: {raw!r}")
        self.set(KEYS[name], value)
        return value

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self.path, e)
            return
        if isinstance(data, dict):
            self._data = data
        else:
            log.warning("Ignoring settings file %s: top level is not an object", self.path)

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self.path, e)


def default_settings_path() -> Path:
    return xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE

"""JSON-backed settings store."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from reclaim.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "reclaim"
_SETTINGS_FILE = "settings.json"

DEFAULTS: dict[str, Any] = {
    "scanners": {"disabled": []},
    "thresholds": {},
    "protected": {"extra_paths": []},
    "project_leftovers": {"extra_roots": []},
    "large_files": {"extra_roots": []},
}


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("scanners.disabled")  # reads data["scanners"]["disabled"]
        settings.set("thresholds.caches", 5_000_000)  # writes + saves

    Keys missing from the file fall back to DEFAULTS.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, falling back to DEFAULTS."""
        found, value = _lookup(self._data, key)
        if found:
            return value
        found, value = _lookup(DEFAULTS, key)
        if found:
            return copy.deepcopy(value)
        return default

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

    def disabled_scanners(self) -> set[str]:
        return {str(s) for s in self.get("scanners.disabled", []) or []}

    def threshold(self, scanner_id: str) -> int | None:
        """Minimum size override for a scanner, or None to keep its default."""
        value = self.get(f"thresholds.{scanner_id}")
        if value is None:
            return None
        try:
            threshold = int(value)
        except (TypeError, ValueError):
            log.warning("Ignoring invalid threshold for %s: %r", scanner_id, value)
            return None
        if threshold < 0:
            log.warning("Ignoring negative threshold for %s: %r", scanner_id, value)
            return None
        return threshold

    def string_list(self, key: str) -> list[str]:
        value = self.get(key, [])
        if not isinstance(value, list):
            log.warning("Expected a list for %s, got %r", key, value)
            return []
        return [str(v) for v in value]

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Ignoring settings file %s: top level is not an object", self._path)
            return
        self._data = data

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)


def _lookup(data: dict[str, Any], key: str) -> tuple[bool, Any]:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node

"""JSON file storage for lifetime statistics and the audit log location."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from reclaim.utils import xdg_data_home

log = logging.getLogger(__name__)

_DATA_DIR = xdg_data_home() / "reclaim"

HISTORY_FILE = _DATA_DIR / "history.json"
LOG_DIR = _DATA_DIR / "logs"


def _empty_history() -> dict[str, Any]:
    return {"sessions": []}


def load_history() -> dict[str, Any]:
    """Load the history file, returning empty structure if missing or damaged."""
    if not HISTORY_FILE.exists():
        return _empty_history()
    try:
        with open(HISTORY_FILE, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        log.exception("Failed to load history file: %s", HISTORY_FILE)
        return _empty_history()
    if not isinstance(data, dict) or not isinstance(data.get("sessions"), list):
        log.warning("Ignoring malformed history file: %s", HISTORY_FILE)
        return _empty_history()
    return data


def save_history(data: dict[str, Any]) -> None:
    """Write the history data to disk, replacing the old file atomically."""
    try:
        HISTORY_FILE.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=HISTORY_FILE.parent, prefix=".history-", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, HISTORY_FILE)
    except OSError:
        log.exception("Failed to save history file: %s", HISTORY_FILE)


def log_dir() -> Path:
    """Directory holding the daily audit log files."""
    return LOG_DIR

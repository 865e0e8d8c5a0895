"""Append-only audit log of every clean action.

One human-readable line per action, written to a daily file::

    [2026-10-18T09:12:44+00:00] DELETE 1.2 GB /Users/me/Library/Caches/com.spotify.client
    [2026-10-18T09:12:45+00:00] SKIP 300.0 MB /Users/me/.npm - in use

Writes go through a queue drained by one daemon thread, so callers never
block on disk I/O and concurrent callers never interleave within a line.
A failed write is logged and dropped.
"""

from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime, timezone
from pathlib import Path

from reclaim import storage
from reclaim.utils import bytes_to_human

log = logging.getLogger(__name__)


class AuditLog:
    """Asynchronous, best-effort writer for the audit trail."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory
        self._queue: queue.Queue[tuple[datetime, str]] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._start_lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory if self._directory is not None else storage.log_dir()

    def log_file(self, when: datetime) -> Path:
        return self.directory / f"{when:%Y-%m-%d}.log"

    def append(self, action: str, path: Path | str, size: int, note: str | None = None) -> None:
        """Queue one audit line; returns immediately."""
        when = datetime.now(timezone.utc)
        line = f"[{when.isoformat(timespec='seconds')}] {action.upper()} {bytes_to_human(size)} {path}"
        if note:
            line += f" - {note}"
        self._ensure_worker()
        self._queue.put((when, line))

    def flush(self) -> None:
        """Block until every queued line has been written or dropped."""
        if self._worker is not None:
            self._queue.join()

    def _ensure_worker(self) -> None:
        with self._start_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = threading.Thread(target=self._drain, name="reclaim-audit", daemon=True)
                self._worker.start()

    def _drain(self) -> None:
        while True:
            when, line = self._queue.get()
            try:
                self._write(when, line)
            except OSError as e:
                log.warning("Could not write audit log line: %s", e)
            finally:
                self._queue.task_done()

    def _write(self, when: datetime, line: str) -> None:
        target = self.log_file(when)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "a", encoding="utf-8") as f:
            f.write(line + "\n")

"""Running-application detection."""

from __future__ import annotations

import logging
import threading
import time
from typing import Protocol

import psutil

log = logging.getLogger(__name__)

# How long a process snapshot is reused before psutil is queried again.
_SNAPSHOT_TTL = 2.0


class LivenessOracle(Protocol):
    """Answers whether an application associated with a name is running."""

    def is_running(self, identifier: str) -> bool:
        """Exact match against running process identifiers."""
        ...

    def matches(self, token: str) -> bool:
        """Case-insensitive substring match against running process identifiers."""
        ...


class ProcessLivenessOracle:
    """Liveness oracle backed by the process table.

    Process names and executable basenames both count as identifiers, so
    ``"Google Chrome"`` and ``"chrome"`` can be matched on either platform.
    """

    def __init__(self, ttl: float = _SNAPSHOT_TTL) -> None:
        self._ttl = ttl
        self._lock = threading.Lock()
        self._snapshot: frozenset[str] = frozenset()
        self._taken_at: float | None = None

    def running_identifiers(self) -> frozenset[str]:
        """Return identifiers of running processes, refreshing stale snapshots."""
        with self._lock:
            now = time.monotonic()
            if self._taken_at is None or now - self._taken_at >= self._ttl:
                self._snapshot = self._collect()
                self._taken_at = now
            return self._snapshot

    def is_running(self, identifier: str) -> bool:
        if not identifier:
            return False
        return identifier in self.running_identifiers()

    def matches(self, token: str) -> bool:
        if not token:
            return False
        needle = token.casefold()
        return any(needle in name.casefold() for name in self.running_identifiers())

    @staticmethod
    def _collect() -> frozenset[str]:
        names: set[str] = set()
        for proc in psutil.process_iter(["name", "exe"]):
            info = proc.info
            if info.get("name"):
                names.add(info["name"])
            exe = info.get("exe")
            if exe:
                names.add(exe.rsplit("/", 1)[-1])
        log.debug("Process snapshot: %d identifiers", len(names))
        return frozenset(names)


def app_running(oracle: LivenessOracle, app_id: str | None, app_name: str | None, token: str) -> bool:
    """Check whether the application associated with an item is running.

    Items without an associated application are never considered in use.
    Otherwise the identifier is matched exactly and the folder token and
    display name are matched fuzzily.
    """
    if app_id is None and app_name is None:
        return False
    if app_id and (oracle.is_running(app_id) or oracle.matches(app_id)):
        return True
    if token and oracle.matches(token):
        return True
    return bool(app_name) and oracle.matches(app_name)

"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

import reclaim.storage as storage
from reclaim.core.audit import AuditLog
from reclaim.core.protected import ProtectedPaths
from reclaim.core.tools import EXIT_NOT_FOUND, CommandResult
from reclaim.models.scanner import ScanContext
from reclaim.settings import Settings


class FakeOracle:
    """Liveness oracle with a fixed set of running process names."""

    def __init__(self, running: set[str] | None = None) -> None:
        self.running = set(running or ())

    def is_running(self, identifier: str) -> bool:
        return identifier in self.running

    def matches(self, token: str) -> bool:
        needle = token.casefold()
        return bool(needle) and any(needle in name.casefold() for name in self.running)


class FakeRunner:
    """Tool runner that replays canned output and records every call."""

    def __init__(self, responses: dict[tuple[str, ...], CommandResult] | None = None, available: bool = True) -> None:
        self.name = "docker"
        self.responses = dict(responses or {})
        self._available = available
        self.calls: list[list[str]] = []

    def available(self) -> bool:
        return self._available

    def run(self, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        if not self._available:
            return CommandResult(stdout="", stderr="docker not found", returncode=EXIT_NOT_FOUND)
        return self.responses.get(tuple(args), CommandResult(stdout="", stderr="", returncode=0))


def write_file(path: Path, size: int) -> Path:
    """Create a file of incompressible data."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(os.urandom(size))
    return path


@pytest.fixture(autouse=True)
def reset_settings_singleton():
    Settings._instance = None
    yield
    Settings._instance = None


@pytest.fixture
def isolate_storage(tmp_path, monkeypatch):
    """Redirect storage to a temp directory."""
    data_dir = tmp_path / "reclaim_data"
    data_dir.mkdir()
    history_file = data_dir / "history.json"
    monkeypatch.setattr(storage, "HISTORY_FILE", history_file)
    monkeypatch.setattr(storage, "_DATA_DIR", data_dir)
    monkeypatch.setattr(storage, "LOG_DIR", data_dir / "logs")
    return history_file


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Empty home directory; XDG locations default to inside it."""
    path = tmp_path / "home"
    path.mkdir()
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    return path


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def context(home, oracle, runner):
    return ScanContext(home=home, guard=ProtectedPaths(home=home), oracle=oracle, runner=runner)


@pytest.fixture
def audit(tmp_path):
    return AuditLog(tmp_path / "audit")

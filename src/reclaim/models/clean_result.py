"""Cleaning outcome dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class CleanOutcome:
    """Result of a clean pass.

    ``freed_bytes`` sums the sizes recorded at scan time for every removed
    item. It is an estimate: the space the filesystem actually gives back
    can differ (snapshots, hard links, files reopened by other processes).
    """

    removed_count: int = 0
    freed_bytes: int = 0
    failures: list[str] = field(default_factory=list)
    removed_paths: list[Path] = field(default_factory=list)

    def record_removed(self, path: Path, size_bytes: int) -> None:
        self.removed_count += 1
        self.freed_bytes += size_bytes
        self.removed_paths.append(path)

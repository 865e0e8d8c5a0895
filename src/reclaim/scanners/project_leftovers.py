"""Scanner for regenerable dependency and build folders inside projects."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.models.scanner import CategoryScanner, ScanContext

log = logging.getLogger(__name__)

# Folder name -> label; each regenerates with a single command
TARGET_FOLDERS: dict[str, str] = {
    "node_modules": "node_modules",  # npm install
    ".venv": "Python venv",  # python -m venv
    "venv": "Python venv",
    "__pycache__": "Python cache",
    "vendor": "vendor",  # bundle install / composer install
    "Pods": "CocoaPods",  # pod install
    ".build": "Swift build",
    "target": "Rust/Maven build",
    "build": "Build output",
    "dist": "Dist output",
    ".next": "Next.js cache",
    ".nuxt": "Nuxt cache",
    ".turbo": "Turbo cache",
}

SCAN_ROOTS = ("Developer", "Developer.nosync", "Projects", "Code", "repos", "src", "Sites", "Documents")

_SKIP_DIRS = {"Library", "Applications"}

_MAX_DEPTH = 5


class ProjectLeftoversScanner(CategoryScanner):
    """Finds dependency folders under the usual project roots.

    Descends at most five levels below each root and never into a folder
    it reports. Hidden folders other than known targets are skipped.
    """

    category = Category.PROJECT_LEFTOVERS
    min_size = 5_000_000
    auto_select_size = 50_000_000
    """Folders larger than this are selected by default."""

    def __init__(self, context: ScanContext | None = None, extra_roots: Iterable[str] = ()) -> None:
        super().__init__(context)
        self._extra_roots = tuple(extra_roots)

    @property
    def roots(self) -> list[Path]:
        candidates = [self.home / name for name in SCAN_ROOTS]
        candidates.extend(Path(os.path.expanduser(r)) for r in self._extra_roots)
        return [r for r in candidates if r.is_dir()]

    @property
    def unavailable_reason(self) -> str | None:
        if not self.roots:
            return "No project directories found"
        return None

    def scan(self) -> list[CandidateItem]:
        items: list[CandidateItem] = []
        seen: set[Path] = set()
        for root in self.roots:
            self._scan_directory(root, 0, items, seen)
        return items

    def _scan_directory(self, directory: Path, depth: int, items: list[CandidateItem], seen: set[Path]) -> None:
        if depth >= _MAX_DEPTH or self._forbidden(directory):
            return

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError:
            log.debug("Cannot read directory: %s", directory)
            return

        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            name = entry.name
            if name.startswith(".") and name not in TARGET_FOLDERS:
                continue
            if name in _SKIP_DIRS:
                continue

            path = Path(entry.path)
            if name in TARGET_FOLDERS:
                if path not in seen and not self._forbidden(path):
                    seen.add(path)
                    self._report(path, items)
            else:
                self._scan_directory(path, depth + 1, items, seen)

    def _report(self, path: Path, items: list[CandidateItem]) -> None:
        size = self._measure(path)
        if size < self.min_size:
            return
        items.append(
            CandidateItem(
                path=path,
                name=f"{path.parent.name}/{TARGET_FOLDERS[path.name]}",
                size_bytes=size,
                category=self.category,
                selected=self._auto_select(size > self.auto_select_size),
            )
        )

"""Scanner for oversized files in the user's document folders."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.models.scanner import CategoryScanner, ScanContext
from reclaim.utils import allocated_size

log = logging.getLogger(__name__)

SCAN_ROOTS = ("Downloads", "Desktop", "Documents")

# Directories the OS presents as single documents
_BUNDLE_SUFFIXES = (
    ".app",
    ".bundle",
    ".framework",
    ".plugin",
    ".kext",
    ".photoslibrary",
    ".musiclibrary",
    ".xcarchive",
    ".xcodeproj",
    ".xcworkspace",
    ".pkg",
    ".rtfd",
)

_MAX_DEPTH = 12


class LargeFilesScanner(CategoryScanner):
    """Lists single files of 100 MB or more.

    These are the user's own files, so nothing is ever selected by
    default and removal goes through the trash.
    """

    category = Category.LARGE_FILES
    min_size = 100_000_000

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
            return "No document folders found"
        return None

    def scan(self) -> list[CandidateItem]:
        items: list[CandidateItem] = []
        seen: set[Path] = set()

        for root in self.roots:
            if self._forbidden(root):
                continue
            root_depth = len(root.parts)
            for dirpath, dirnames, filenames in os.walk(root, onerror=self._walk_error):
                current = Path(dirpath)
                if len(current.parts) - root_depth >= _MAX_DEPTH:
                    dirnames.clear()
                else:
                    dirnames[:] = [d for d in dirnames if self._should_descend(current / d)]

                for filename in filenames:
                    if filename.startswith("."):
                        continue
                    path = current / filename
                    if path in seen:
                        continue
                    item = self._candidate(path)
                    if item is not None:
                        seen.add(path)
                        items.append(item)

        return items

    def _should_descend(self, path: Path) -> bool:
        name = path.name
        if name.startswith(".") or name.lower().endswith(_BUNDLE_SUFFIXES):
            return False
        if path.is_symlink():
            return False
        return not self._forbidden(path)

    def _candidate(self, path: Path) -> CandidateItem | None:
        try:
            st = path.lstat()
        except OSError:
            log.debug("Cannot stat: %s", path)
            return None
        if not path.is_file() or path.is_symlink():
            return None
        size = allocated_size(st)
        if size < self.min_size or self._forbidden(path):
            return None
        return CandidateItem(
            path=path,
            name=path.name,
            size_bytes=size,
            category=self.category,
            selected=False,
        )

    @staticmethod
    def _walk_error(error: OSError) -> None:
        log.debug("Cannot read directory: %s", error.filename)

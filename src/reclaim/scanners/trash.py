"""Scanner for the user's trash."""

from __future__ import annotations

import logging
from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.models.scanner import CategoryScanner
from reclaim.utils import is_macos, xdg_data_home

log = logging.getLogger(__name__)


class TrashScanner(CategoryScanner):
    """Reports the whole trash as one item.

    Cleaning empties the trash directory but keeps the directory itself.
    """

    category = Category.TRASH

    def trash_dir(self) -> Path:
        if is_macos():
            return self.home / ".Trash"
        return xdg_data_home(self.home) / "Trash"

    def _count_dir(self, trash_dir: Path) -> Path:
        # Freedesktop trash keeps the trashed files in files/ and metadata in info/
        files_dir = trash_dir / "files"
        return files_dir if files_dir.is_dir() else trash_dir

    @property
    def unavailable_reason(self) -> str | None:
        if not self.trash_dir().is_dir():
            return "Trash directory not found"
        return None

    def scan(self) -> list[CandidateItem]:
        trash_dir = self.trash_dir()
        if not trash_dir.is_dir() or self._forbidden(trash_dir):
            return []

        size = self._measure(trash_dir)
        if size <= 0:
            return []

        try:
            count = sum(1 for _ in self._count_dir(trash_dir).iterdir())
        except OSError:
            log.debug("Cannot read trash directory: %s", trash_dir)
            count = 0

        return [
            CandidateItem(
                path=trash_dir,
                name=f"Trash ({count} items)",
                size_bytes=size,
                category=self.category,
                selected=self._auto_select(),
            )
        ]

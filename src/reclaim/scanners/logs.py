"""Scanner for application logs and crash reports."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.models.scanner import SubdirectoryScanner

_CRASH_REPORTS = "DiagnosticReports"


class LogsScanner(SubdirectoryScanner):
    """Reports log folders and the crash report folder of 100 KB or more."""

    category = Category.LOGS
    min_size = 100_000
    _excluded_names = frozenset({_CRASH_REPORTS})

    @property
    def _logs_dir(self) -> Path:
        return self.home / "Library" / "Logs"

    @property
    def _parents(self) -> tuple[Path, ...]:
        return (self._logs_dir,)

    def scan(self) -> list[CandidateItem]:
        items = super().scan()

        crash_reports = self._logs_dir / _CRASH_REPORTS
        if crash_reports.is_dir() and not self._forbidden(crash_reports):
            size = self._measure(crash_reports)
            if size >= self.min_size:
                items.append(
                    CandidateItem(
                        path=crash_reports,
                        name="Crash Reports",
                        size_bytes=size,
                        category=self.category,
                        selected=self._auto_select(),
                    )
                )

        return items

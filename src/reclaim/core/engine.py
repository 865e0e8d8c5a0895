"""Scan and clean orchestration."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from reclaim.core.deleter import SafeDeleter
from reclaim.core.disk import DiskUsage, current_disk_usage
from reclaim.core.registry import ScannerRegistry
from reclaim.core.tracker import Tracker
from reclaim.errors import InvalidTransition
from reclaim.models.category import Category
from reclaim.models.clean_result import CleanOutcome
from reclaim.models.scan_result import CandidateItem, ScanResult

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (scanner_id, status_message)
ResultCallback = Callable[[ScanResult], None]


def _notify(callback: Callable[..., None] | None, *args) -> None:
    """Call a presentation callback; its failures never reach the scan."""
    if callback is None:
        return
    try:
        callback(*args)
    except Exception:
        log.exception("Scan callback %r failed", callback)


class EngineState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    RESULTS = "results"
    CLEANING = "cleaning"
    DONE = "done"


class CleanerEngine:
    """Sequences scanning and cleaning and owns all selection state.

    Scanners run one after another in registry order. A scan can run on
    a background thread (see start_scan) and be cancelled between two
    scanners. Results and selection flags only change under the engine's
    lock, so a UI thread may toggle items while nothing else writes them.
    """

    def __init__(
        self,
        registry: ScannerRegistry,
        deleter: SafeDeleter,
        tracker: Tracker | None = None,
        disk_usage: Callable[[], DiskUsage] = current_disk_usage,
    ) -> None:
        self.registry = registry
        self.deleter = deleter
        self.tracker = tracker if tracker is not None else Tracker()
        self._disk_usage = disk_usage
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._state = EngineState.IDLE
        self._results: list[ScanResult] = []
        self._last_outcome: CleanOutcome | None = None
        self._disk_delta = 0

    # -- state ---------------------------------------------------------

    @property
    def state(self) -> EngineState:
        with self._lock:
            return self._state

    @property
    def results(self) -> list[ScanResult]:
        with self._lock:
            return list(self._results)

    @property
    def last_outcome(self) -> CleanOutcome | None:
        return self._last_outcome

    @property
    def disk_delta(self) -> int:
        """Change in free bytes observed across the last clean pass."""
        return self._disk_delta

    @property
    def total_found_bytes(self) -> int:
        with self._lock:
            return sum(r.total_bytes for r in self._results)

    @property
    def total_selected_bytes(self) -> int:
        with self._lock:
            return sum(r.selected_bytes for r in self._results)

    @property
    def total_selected_count(self) -> int:
        with self._lock:
            return sum(r.selected_count for r in self._results)

    def _require(self, *allowed: EngineState, action: str) -> None:
        if self._state not in allowed:
            raise InvalidTransition(f"Cannot {action} while {self._state.value}")

    # -- scanning ------------------------------------------------------

    def scan(
        self,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> list[ScanResult]:
        """Run every available scanner and keep the non-empty results.

        Allowed when idle or when showing results (rescan). Callback
        failures are logged and never interrupt the scan.

        Args:
            on_progress: Optional callback for progress updates.
            on_result: Optional callback fired after each non-empty category.

        Returns:
            The new results; empty when nothing was found or the scan was cancelled.
        """
        self._begin_scan()
        return self._run_scan(on_progress, on_result)

    def start_scan(
        self,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> threading.Thread:
        """Start a scan on a background thread and return the thread."""
        self._begin_scan()
        thread = threading.Thread(
            target=self._run_scan,
            args=(on_progress, on_result),
            name="reclaim-scan",
            daemon=True,
        )
        thread.start()
        return thread

    def cancel(self) -> bool:
        """Ask a running scan to stop at the next scanner boundary.

        Returns:
            Whether a scan was running.
        """
        with self._lock:
            if self._state is not EngineState.SCANNING:
                return False
            self._cancel.set()
        log.info("Scan cancellation requested")
        return True

    def _begin_scan(self) -> None:
        with self._lock:
            self._require(EngineState.IDLE, EngineState.RESULTS, action="scan")
            self._state = EngineState.SCANNING
            self._results = []
            self._last_outcome = None
            self._cancel.clear()

    def _run_scan(
        self,
        on_progress: ProgressCallback | None,
        on_result: ResultCallback | None,
    ) -> list[ScanResult]:
        collected: list[ScanResult] = []
        claimed: set[Path] = set()

        try:
            for scanner in self.registry.get_available():
                if self._cancel.is_set():
                    break
                _notify(on_progress, scanner.id, "scanning")
                try:
                    items = scanner.scan()
                except Exception:
                    log.exception("Scanner '%s' failed during scan", scanner.id)
                    _notify(on_progress, scanner.id, "error")
                    continue
                if self._cancel.is_set():
                    break

                # A path belongs to the first category that reported it.
                fresh = [item for item in items if item.path not in claimed]
                claimed.update(item.path for item in fresh)
                if fresh:
                    result = ScanResult.from_items(scanner.category, fresh)
                    collected.append(result)
                    _notify(on_result, result)
                _notify(on_progress, scanner.id, "done")
        finally:
            results = self._finish_scan(collected)
        return results

    def _finish_scan(self, collected: list[ScanResult]) -> list[ScanResult]:
        with self._lock:
            if self._cancel.is_set():
                self._cancel.clear()
                self._results = []
                self._state = EngineState.IDLE
                log.info("Scan cancelled")
                return []
            self._results = collected
            self._state = EngineState.RESULTS if collected else EngineState.IDLE
            log.info("Scan finished: %d categories with items", len(collected))
            return list(collected)

    # -- selection -----------------------------------------------------

    def _find(self, path: Path | str) -> CandidateItem:
        target = Path(path)
        for result in self._results:
            for item in result.items:
                if item.path == target:
                    return item
        raise KeyError(f"No scanned item at {target}")

    def toggle(self, path: Path | str) -> bool:
        """Flip an item's selection; returns the new state."""
        with self._lock:
            self._require(EngineState.IDLE, EngineState.SCANNING, EngineState.RESULTS, action="change selection")
            item = self._find(path)
            item.selected = not item.selected
            return item.selected

    def set_selected(self, path: Path | str, selected: bool) -> None:
        with self._lock:
            self._require(EngineState.IDLE, EngineState.SCANNING, EngineState.RESULTS, action="change selection")
            self._find(path).selected = selected

    def select_category(self, category: Category, selected: bool) -> None:
        """Select or deselect every item of one category."""
        with self._lock:
            self._require(EngineState.IDLE, EngineState.SCANNING, EngineState.RESULTS, action="change selection")
            for result in self._results:
                if result.category is category:
                    for item in result.items:
                        item.selected = selected

    def select_all(self, selected: bool) -> None:
        """Select or deselect everything except categories excluded from bulk selection."""
        with self._lock:
            self._require(EngineState.IDLE, EngineState.SCANNING, EngineState.RESULTS, action="change selection")
            for result in self._results:
                if result.category.bulk_selectable:
                    for item in result.items:
                        item.selected = selected

    # -- cleaning ------------------------------------------------------

    def clean(self) -> CleanOutcome:
        """Remove every selected item.

        Allowed only when showing results. Lifetime statistics are updated
        and removed items disappear from the results.
        """
        with self._lock:
            self._require(EngineState.RESULTS, action="clean")
            self._state = EngineState.CLEANING
            selected = [item for result in self._results for item in result.items if item.selected]

        free_before = self._disk_usage().free_bytes
        try:
            outcome = self.deleter.clean(selected)
        except Exception:
            with self._lock:
                self._state = EngineState.RESULTS
            raise
        free_after = self._disk_usage().free_bytes

        if not self.deleter.dry_run:
            self.tracker.record(outcome.freed_bytes, outcome.removed_count)

        with self._lock:
            if not self.deleter.dry_run:
                removed = set(outcome.removed_paths)
                remaining = []
                for result in self._results:
                    items = [item for item in result.items if item.path not in removed]
                    if items:
                        remaining.append(ScanResult(category=result.category, items=items))
                self._results = remaining
            self._last_outcome = outcome
            self._disk_delta = free_after - free_before
            self._state = EngineState.DONE

        return outcome

    def reset(self) -> None:
        """Return to idle, dropping results and the last outcome."""
        with self._lock:
            self._require(EngineState.DONE, EngineState.RESULTS, action="reset")
            self._results = []
            self._last_outcome = None
            self._disk_delta = 0
            self._state = EngineState.IDLE

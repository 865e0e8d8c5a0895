"""Central scanner registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from reclaim.models.category import Category
from reclaim.models.scanner import CategoryScanner

log = logging.getLogger(__name__)


class ScannerRegistry:
    """Stores registered scanners in registration order, one per id."""

    def __init__(self) -> None:
        self._scanners: dict[str, CategoryScanner] = {}

    def register(self, scanner: CategoryScanner) -> None:
        """Register a scanner instance."""
        if scanner.id in self._scanners:
            log.warning("Scanner '%s' already registered, skipping duplicate", scanner.id)
            return
        self._scanners[scanner.id] = scanner
        log.debug("Registered scanner: %s (%s)", scanner.id, scanner.name)

    def get(self, scanner_id: str) -> CategoryScanner | None:
        """Get a scanner by its ID."""
        return self._scanners.get(scanner_id)

    def get_all(self) -> list[CategoryScanner]:
        """Get all registered scanners."""
        return list(self._scanners.values())

    def get_by_category(self, category: Category) -> CategoryScanner | None:
        return next((s for s in self._scanners.values() if s.category is category), None)

    def get_available(self) -> list[CategoryScanner]:
        """Get all scanners that are available on this system."""
        available = []
        for scanner in self._scanners.values():
            try:
                if scanner.is_available():
                    available.append(scanner)
            except Exception:
                log.exception("Error checking availability for scanner '%s'", scanner.id)
        return available

    def __len__(self) -> int:
        return len(self._scanners)

    def __iter__(self) -> Iterator[CategoryScanner]:
        return iter(self._scanners.values())

    def __contains__(self, scanner_id: str) -> bool:
        return scanner_id in self._scanners

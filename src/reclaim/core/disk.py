"""Disk capacity queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import psutil

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiskUsage:
    """Capacity of the volume holding a path, in bytes."""

    total_bytes: int
    used_bytes: int
    free_bytes: int

    @property
    def used_fraction(self) -> float:
        """Used space as a fraction between 0 and 1."""
        if self.total_bytes <= 0:
            return 0.0
        return self.used_bytes / self.total_bytes


def current_disk_usage(path: str = "/") -> DiskUsage:
    """Measure the volume holding *path*; failures report an empty disk."""
    try:
        usage = psutil.disk_usage(path)
    except OSError as e:
        log.warning("Could not read disk usage for %s: %s", path, e)
        return DiskUsage(total_bytes=0, used_bytes=0, free_bytes=0)
    return DiskUsage(total_bytes=usage.total, used_bytes=usage.total - usage.free, free_bytes=usage.free)

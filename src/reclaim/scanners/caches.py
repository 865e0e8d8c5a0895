"""Scanner for per-application cache folders."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scanner import SubdirectoryScanner
from reclaim.utils import xdg_cache_home

# Caches the desktop session keeps open all the time
_EXCLUDE_DIRS = {
    "fontconfig",
    "icon-cache.kcache",
    "gstreamer-1.0",
    "babl",
    "gegl-0.4",
}

# Reported by dedicated scanners
_SCANNER_DIRS = {
    # package managers
    "Homebrew",
    "Yarn",
    "yarn",
    "pip",
    "go-build",
    # browsers
    "Google",
    "Firefox",
    "com.apple.Safari",
    "BraveSoftware",
    "com.microsoft.edgemac",
    "com.operasoftware.Opera",
    "mozilla",
    "google-chrome",
    "chromium",
    "microsoft-edge",
    "opera",
}


class CachesScanner(SubdirectoryScanner):
    """Reports every application cache folder of 1 MB or more."""

    category = Category.CACHES
    min_size = 1_000_000
    _excluded_names = frozenset(_EXCLUDE_DIRS | _SCANNER_DIRS)

    @property
    def _parents(self) -> tuple[Path, ...]:
        return (self.home / "Library" / "Caches", xdg_cache_home(self.home))

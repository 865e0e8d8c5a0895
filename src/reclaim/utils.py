"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reclaim.core.protected import ProtectedPaths

log = logging.getLogger(__name__)

_BLOCK_SIZE = 512


def xdg_cache_home(home: Path | None = None) -> Path:
    """Return XDG_CACHE_HOME, defaulting to ~/.cache."""
    return Path(os.environ.get("XDG_CACHE_HOME", (home or Path.home()) / ".cache"))


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def xdg_data_home(home: Path | None = None) -> Path:
    """Return XDG_DATA_HOME, defaulting to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME", (home or Path.home()) / ".local" / "share"))


def is_macos() -> bool:
    return sys.platform == "darwin"


def allocated_size(st: os.stat_result) -> int:
    """On-disk size of a stat result.

    Uses the allocated block count where the platform reports one, so
    sparse and compressed files count for what they actually occupy.
    """
    blocks = getattr(st, "st_blocks", None)
    if blocks is None:
        return st.st_size
    return blocks * _BLOCK_SIZE


def directory_size(path: Path | str, guard: ProtectedPaths | None = None) -> int:
    """Calculate the allocated size of a directory tree.

    Only regular files are counted. Symlinks and special files are never
    followed, hard-linked files count once, and subdirectories the guard
    forbids are skipped entirely. Unreadable subdirectories are skipped
    rather than failing the whole walk.

    Returns:
        Total allocated bytes (0 for a missing path).
    """
    try:
        st = os.lstat(path)
    except OSError:
        return 0
    if stat.S_ISREG(st.st_mode):
        return allocated_size(st)
    if not stat.S_ISDIR(st.st_mode):
        return 0

    total = 0
    seen_inodes: set[tuple[int, int]] = set()
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            entry_stat = entry.stat(follow_symlinks=False)
                            if entry_stat.st_nlink > 1:
                                key = (entry_stat.st_dev, entry_stat.st_ino)
                                if key in seen_inodes:
                                    continue
                                seen_inodes.add(key)
                            total += allocated_size(entry_stat)
                        elif entry.is_dir(follow_symlinks=False):
                            if guard is not None and guard.is_forbidden(entry.path):
                                log.debug("Not measuring protected directory: %s", entry.path)
                                continue
                            stack.append(entry.path)
                    except OSError:
                        log.debug("Cannot stat: %s", entry.path)
        except OSError:
            log.debug("Cannot read directory: %s", current)
    return total


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_relative_time(iso_timestamp: str) -> str:
    """Format an ISO timestamp as relative time ('2 hours ago')."""
    from datetime import datetime, timezone

    dt = datetime.fromisoformat(iso_timestamp)
    seconds = int((datetime.now(timezone.utc) - dt).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        m = seconds // 60
        return f"{m} minute{'s' if m != 1 else ''} ago"
    if seconds < 86400:
        h = seconds // 3600
        return f"{h} hour{'s' if h != 1 else ''} ago"
    d = seconds // 86400
    if d < 30:
        return f"{d} day{'s' if d != 1 else ''} ago"
    mo = d // 30
    if mo < 12:
        return f"{mo} month{'s' if mo != 1 else ''} ago"
    y = d // 365
    return f"{y} year{'s' if y != 1 else ''} ago"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"


_KNOWN_APPS = {
    "com.apple.Safari": "Safari",
    "com.google.Chrome": "Google Chrome",
    "org.mozilla.firefox": "Firefox",
    "com.brave.Browser": "Brave",
    "com.microsoft.VSCode": "VS Code",
    "com.apple.dt.Xcode": "Xcode",
    "com.spotify.client": "Spotify",
    "com.tinyspeck.slackmacgap": "Slack",
    "us.zoom.xos": "Zoom",
    "com.hnc.Discord": "Discord",
    "com.docker.docker": "Docker",
}

_VENDOR_PREFIXES = ("com.apple.", "com.", "org.", "io.")


def resolve_app_name(folder_name: str) -> str:
    """Turn a cache or log folder name (often a bundle id) into a display name."""
    if folder_name in _KNOWN_APPS:
        return _KNOWN_APPS[folder_name]
    cleaned = folder_name
    for prefix in _VENDOR_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    cleaned = cleaned.rsplit(".", 1)[-1] or folder_name
    return cleaned.title()

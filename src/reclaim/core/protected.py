"""Protected filesystem locations that must never be scanned into or deleted.

Covers identity and credential stores, cloud-synced documents,
communication data, personalization stores, media libraries and core
operating-system directories. Matching resolves symlinks, ignores case and
works on whole path segments, so ``~/.sshkeys-backup`` is not protected by
``~/.ssh`` but ``~/.SSH/id_rsa`` and any symlink into ``~/.ssh`` are.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

log = logging.getLogger(__name__)

# Relative entries are rooted at the user's home directory.
PROTECTED_ROOTS: tuple[str, ...] = (
    # Cloud storage
    "Library/Mobile Documents",
    "Library/CloudStorage",
    # User data
    "Library/Photos",
    "Library/Mail",
    "Library/Messages",
    "Library/Calendars",
    "Library/Contacts",
    "Library/Safari",
    # Credentials and security
    "Library/Keychains",
    "Library/Cookies",
    "Library/Accounts",
    ".ssh",
    ".gnupg",
    ".aws",
    ".kube",
    ".password-store",
    ".local/share/keyrings",
    # App settings and data (caches live elsewhere)
    "Library/Preferences",
    "Library/Application Support",
    "Library/Containers",
    "Library/Group Containers",
    # System intelligence
    "Library/Biome",
    "Library/PersonalizationPortrait",
    "Library/Suggestions",
    "Library/CoreData",
    # Media
    "Library/Music",
    "Music",
    "Pictures",
    "Movies",
    # System
    "/System",
    "/Library/Apple",
    "/Library/LaunchDaemons",
    "/Library/LaunchAgents",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/private/var/db",
)


def _normalize(path: str) -> str:
    return os.path.normpath(path).casefold()


class ProtectedPaths:
    """Decides whether a path lies inside a protected root.

    Args:
        home: Home directory relative roots are anchored at.
        roots: Protected roots; defaults to PROTECTED_ROOTS.
        extra: Additional roots, e.g. from user settings.
    """

    def __init__(
        self,
        home: Path | None = None,
        roots: Iterable[str] = PROTECTED_ROOTS,
        extra: Iterable[str] = (),
    ) -> None:
        self._home = Path(home) if home is not None else Path.home()
        normalized: set[str] = set()
        for root in (*roots, *extra):
            absolute = self._anchor(root)
            normalized.add(_normalize(absolute))
            normalized.add(_normalize(os.path.realpath(absolute)))
        self._roots = tuple(sorted(normalized))

    @property
    def roots(self) -> tuple[str, ...]:
        return self._roots

    def _anchor(self, root: str) -> str:
        expanded = os.path.expanduser(root) if root.startswith("~") else root
        if os.path.isabs(expanded):
            return expanded
        return os.path.join(self._home, expanded)

    def _under_root(self, normalized: str) -> bool:
        for root in self._roots:
            if normalized == root or normalized.startswith(root.rstrip(os.sep) + os.sep):
                return True
        return False

    def is_forbidden(self, path: Path | str) -> bool:
        """Check whether *path* is, or lies inside, a protected root.

        Both the path as written and its symlink-resolved form are tested.
        Never raises: a path that cannot be interpreted is forbidden.
        """
        try:
            raw = os.fspath(path)
            if not raw:
                return True
            absolute = os.path.abspath(raw)
            resolved = os.path.realpath(absolute)
        except (OSError, ValueError, TypeError):
            log.debug("Treating unresolvable path as protected: %r", path)
            return True
        return self._under_root(_normalize(absolute)) or self._under_root(_normalize(resolved))

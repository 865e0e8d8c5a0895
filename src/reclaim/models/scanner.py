"""Base scanner interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from reclaim.core.liveness import LivenessOracle, ProcessLivenessOracle, app_running
from reclaim.core.protected import ProtectedPaths
from reclaim.core.tools import ToolRunner
from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.utils import directory_size, resolve_app_name

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanContext:
    """Everything a scanner needs from the outside world.

    Scanners never look up the home directory or the process table on
    their own, so tests can point them at a temporary home and fake
    collaborators.
    """

    home: Path
    guard: ProtectedPaths
    oracle: LivenessOracle
    runner: ToolRunner

    @classmethod
    def default(cls, home: Path | None = None, extra_protected: Iterable[str] = ()) -> ScanContext:
        home = Path(home) if home is not None else Path.home()
        return cls(
            home=home,
            guard=ProtectedPaths(home=home, extra=extra_protected),
            oracle=ProcessLivenessOracle(),
            runner=ToolRunner(),
        )


class CategoryScanner(ABC):
    """Base class for all category scanners.

    A scanner only discovers and measures. It MUST NOT delete anything;
    removal belongs to the deletion engine.
    """

    min_size: int = 0
    """Smallest size, in bytes, an item needs to be reported."""

    def __init__(self, context: ScanContext | None = None) -> None:
        self.context = context if context is not None else ScanContext.default()

    @property
    @abstractmethod
    def category(self) -> Category:
        """The category every item from this scanner belongs to."""

    @property
    def id(self) -> str:
        return self.category.id

    @property
    def name(self) -> str:
        return self.category.label

    @property
    def description(self) -> str:
        return self.category.description

    @property
    def home(self) -> Path:
        return self.context.home

    @property
    def unavailable_reason(self) -> str | None:
        """Why this scanner cannot work on this system, or None if supported."""
        return None

    def is_available(self) -> bool:
        return self.unavailable_reason is None

    @abstractmethod
    def scan(self) -> list[CandidateItem]:
        """Discover reclaimable items."""

    def _forbidden(self, path: Path) -> bool:
        if self.context.guard.is_forbidden(path):
            log.debug("Skipping protected path: %s", path)
            return True
        return False

    def _measure(self, path: Path) -> int:
        return directory_size(path, self.context.guard)

    def _in_use(self, app_id: str | None, app_name: str | None, token: str) -> bool:
        return app_running(self.context.oracle, app_id, app_name, token)

    def _auto_select(self, default: bool = True, in_use: bool = False) -> bool:
        return self.category.auto_select and default and not in_use


@dataclass(frozen=True, slots=True)
class Target:
    """One known location of a fixed-path scanner.

    ``relative_path`` is rooted at the home directory unless absolute.
    Targets with an ``app_id`` belong to an application whose liveness
    is checked.
    """

    relative_path: str
    name: str
    app_id: str | None = None
    auto_select: bool = True


class FixedPathScanner(CategoryScanner, ABC):
    """Base class for scanners with a static table of known locations.

    Subclasses define the category and _targets. Each existing target
    becomes one item.
    """

    @property
    @abstractmethod
    def _targets(self) -> tuple[Target, ...]:
        """Known locations, in display order."""

    def _resolve(self, target: Target) -> Path:
        return self.home / target.relative_path

    @property
    def unavailable_reason(self) -> str | None:
        if not any(self._resolve(t).exists() for t in self._targets):
            return f"No {self.name.lower()} found"
        return None

    def scan(self) -> list[CandidateItem]:
        items: list[CandidateItem] = []
        seen: set[Path] = set()

        for target in self._targets:
            path = self._resolve(target)
            if path in seen or not path.exists() or self._forbidden(path):
                continue
            seen.add(path)

            size = self._measure(path)
            if size < self.min_size:
                continue

            app_name = target.name if target.app_id else None
            in_use = self._in_use(target.app_id, app_name, path.name)
            items.append(
                CandidateItem(
                    path=path,
                    name=target.name,
                    size_bytes=size,
                    category=self.category,
                    app_name=app_name,
                    app_id=target.app_id,
                    selected=self._auto_select(target.auto_select, in_use),
                )
            )

        return items


class SubdirectoryScanner(CategoryScanner, ABC):
    """Base class for scanners that report each child folder of some parents.

    Every child directory becomes one item named after the application it
    belongs to. Folders listed in _excluded_names are left to the scanners
    that own them.
    """

    _excluded_names: frozenset[str] = frozenset()

    @property
    @abstractmethod
    def _parents(self) -> tuple[Path, ...]:
        """Directories whose children are reported."""

    @property
    def unavailable_reason(self) -> str | None:
        if not any(p.is_dir() for p in self._parents):
            return f"No {self.name.lower()} directory found"
        return None

    def scan(self) -> list[CandidateItem]:
        items: list[CandidateItem] = []
        seen: set[Path] = set()

        for parent in self._parents:
            if parent in seen or not parent.is_dir() or self._forbidden(parent):
                continue
            seen.add(parent)
            try:
                children = sorted(parent.iterdir())
            except OSError:
                log.debug("Cannot read directory: %s", parent)
                continue

            for child in children:
                if child.name in self._excluded_names:
                    continue
                try:
                    if child.is_symlink() or not child.is_dir():
                        continue
                except OSError:
                    log.debug("Cannot access: %s", child)
                    continue
                if self._forbidden(child):
                    continue

                size = self._measure(child)
                if size < self.min_size:
                    continue

                app_name = resolve_app_name(child.name)
                in_use = self._in_use(child.name, app_name, child.name)
                items.append(
                    CandidateItem(
                        path=child,
                        name=app_name,
                        size_bytes=size,
                        category=self.category,
                        app_name=app_name,
                        app_id=child.name,
                        selected=self._auto_select(in_use=in_use),
                    )
                )

        return items

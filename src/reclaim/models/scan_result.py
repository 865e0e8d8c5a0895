"""Scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from reclaim.models.category import Category


@dataclass(slots=True, eq=False)
class CandidateItem:
    """One discovered unit of reclaimable storage.

    The path is the identity key: two items with the same path are the
    same item regardless of size or selection state.
    Set ``tool_kind`` for items that are removed through an external tool
    rather than through the filesystem.
    """

    path: Path
    name: str
    size_bytes: int
    category: Category
    app_name: str | None = None
    app_id: str | None = None
    tool_kind: str | None = None
    selected: bool = True

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError(f"Negative size for {self.path}: {self.size_bytes}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateItem):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)


@dataclass(slots=True)
class ScanResult:
    """Items one category produced in a single scan pass."""

    category: Category
    items: list[CandidateItem] = field(default_factory=list)

    @classmethod
    def from_items(cls, category: Category, items: list[CandidateItem]) -> ScanResult:
        """Build a result with items sorted by descending size."""
        return cls(category=category, items=sorted(items, key=lambda i: i.size_bytes, reverse=True))

    @property
    def total_bytes(self) -> int:
        return sum(i.size_bytes for i in self.items)

    @property
    def selected_bytes(self) -> int:
        return sum(i.size_bytes for i in self.items if i.selected)

    @property
    def selected_count(self) -> int:
        return sum(1 for i in self.items if i.selected)

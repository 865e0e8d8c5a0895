"""Categories of reclaimable data and how each one is removed."""

from __future__ import annotations

from enum import Enum


class DeletionMethod(str, Enum):
    """How items of a category are removed."""

    PERMANENT = "permanent"
    EMPTY_CONTENTS = "empty_contents"  # keep the directory, remove its children
    EXTERNAL_TOOL = "external_tool"
    MOVE_TO_TRASH = "move_to_trash"


class Category(Enum):
    """Closed set of reclaimable-data kinds, in scan order.

    Each member's value is ``(id, label, description, deletion method,
    auto-select default)``.
    """

    CACHES = (
        "caches",
        "App Caches",
        "Temporary app data that regenerates automatically",
        DeletionMethod.PERMANENT,
        True,
    )
    LOGS = (
        "logs",
        "Logs",
        "Diagnostic logs and crash reports",
        DeletionMethod.PERMANENT,
        True,
    )
    TOOLCHAIN = (
        "toolchain",
        "Developer Toolchains",
        "Xcode DerivedData, simulators, device support and archives",
        DeletionMethod.PERMANENT,
        True,
    )
    PACKAGE_MANAGERS = (
        "package_managers",
        "Package Manager Caches",
        "Homebrew, npm, Yarn, CocoaPods, Cargo, Gradle and other download caches",
        DeletionMethod.PERMANENT,
        True,
    )
    BROWSER = (
        "browser",
        "Browser Cache",
        "Chrome, Firefox, Safari, Brave, Edge and Opera cached data",
        DeletionMethod.PERMANENT,
        True,
    )
    CONTAINERS = (
        "containers",
        "Container Runtime",
        "Dangling Docker images, stopped containers and build cache",
        DeletionMethod.EXTERNAL_TOOL,
        True,
    )
    PROJECT_LEFTOVERS = (
        "project_leftovers",
        "Project Leftovers",
        "node_modules, virtualenvs and build output that regenerate with one command",
        DeletionMethod.PERMANENT,
        True,
    )
    LARGE_FILES = (
        "large_files",
        "Large Files",
        "Files larger than 100 MB in Downloads, Desktop and Documents",
        DeletionMethod.MOVE_TO_TRASH,
        False,
    )
    TRASH = (
        "trash",
        "Trash",
        "Files already in the Trash",
        DeletionMethod.EMPTY_CONTENTS,
        True,
    )

    def __init__(
        self,
        id: str,
        label: str,
        description: str,
        deletion_method: DeletionMethod,
        auto_select: bool,
    ) -> None:
        self.id = id
        self.label = label
        self.description = description
        self.deletion_method = deletion_method
        self.auto_select = auto_select

    @property
    def liveness_exempt(self) -> bool:
        """Whether cleaning skips the running-application check."""
        return self in (Category.CONTAINERS, Category.PROJECT_LEFTOVERS)

    @property
    def bulk_selectable(self) -> bool:
        """Whether "select all" may select items of this category."""
        return self is not Category.LARGE_FILES

    @classmethod
    def from_id(cls, category_id: str) -> Category:
        """Look up a category by its string id."""
        for category in cls:
            if category.id == category_id:
                return category
        raise ValueError(f"Unknown category: {category_id!r}")

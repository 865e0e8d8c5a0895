"""Scanner for package manager download caches."""

from __future__ import annotations

from reclaim.models.category import Category
from reclaim.models.scanner import FixedPathScanner, Target

_TARGETS = (
    Target("Library/Caches/Homebrew", "Homebrew"),
    Target(".cache/Homebrew", "Homebrew"),
    Target(".npm", "npm"),
    Target("Library/Caches/Yarn", "Yarn"),
    Target(".cache/yarn", "Yarn"),
    Target(".pnpm-store", "pnpm"),
    Target(".local/share/pnpm/store", "pnpm"),
    Target(".cocoapods/repos", "CocoaPods"),
    Target(".cargo/registry", "Cargo"),
    Target(".gem", "RubyGems"),
    Target(".gradle/caches", "Gradle"),
    Target(".m2/repository", "Maven"),
    Target("Library/Caches/pip", "pip"),
    Target(".cache/pip", "pip"),
    Target(".cache/go-build", "Go Build"),
    Target("Library/Caches/go-build", "Go Build"),
    Target(".nuget/packages", "NuGet"),
)


class PackageManagersScanner(FixedPathScanner):
    """Reports package manager caches of 1 MB or more.

    Every tool re-downloads what it needs, so all entries are safe to
    remove. Entries that do not exist on this platform are skipped.
    """

    category = Category.PACKAGE_MANAGERS
    min_size = 1_000_000

    @property
    def _targets(self) -> tuple[Target, ...]:
        return _TARGETS

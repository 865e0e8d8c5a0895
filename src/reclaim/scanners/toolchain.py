"""Scanner for Xcode and simulator build products."""

from __future__ import annotations

from reclaim.models.category import Category
from reclaim.models.scanner import FixedPathScanner, Target

_TARGETS = (
    Target("Library/Developer/Xcode/DerivedData", "DerivedData"),
    Target("Library/Developer/CoreSimulator/Devices", "Simulators"),
    Target("Library/Developer/CoreSimulator/Caches", "Simulator Caches"),
    Target("Library/Developer/Xcode/iOS DeviceSupport", "iOS Device Support"),
    Target("Library/Developer/Xcode/watchOS DeviceSupport", "watchOS Device Support"),
    # Archives hold signed builds that cannot be regenerated
    Target("Library/Developer/Xcode/Archives", "Archives", auto_select=False),
    Target("Library/Developer/DeveloperDiskImages", "Developer Disk Images"),
)


class ToolchainScanner(FixedPathScanner):
    """Reports developer toolchain output of 1 MB or more."""

    category = Category.TOOLCHAIN
    min_size = 1_000_000

    @property
    def _targets(self) -> tuple[Target, ...]:
        return _TARGETS

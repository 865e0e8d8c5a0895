"""Builds the built-in scanners from settings."""

from __future__ import annotations

import logging

from reclaim.core.registry import ScannerRegistry
from reclaim.models.scanner import CategoryScanner, ScanContext
from reclaim.scanners.browser import BrowserScanner
from reclaim.scanners.caches import CachesScanner
from reclaim.scanners.containers import ContainersScanner
from reclaim.scanners.large_files import LargeFilesScanner
from reclaim.scanners.logs import LogsScanner
from reclaim.scanners.package_managers import PackageManagersScanner
from reclaim.scanners.project_leftovers import ProjectLeftoversScanner
from reclaim.scanners.toolchain import ToolchainScanner
from reclaim.scanners.trash import TrashScanner
from reclaim.settings import Settings

log = logging.getLogger(__name__)


def build_context(settings: Settings) -> ScanContext:
    """Default scan context with the configured extra protected paths."""
    return ScanContext.default(extra_protected=settings.string_list("protected.extra_paths"))


def _builtin_scanners(context: ScanContext, settings: Settings) -> list[CategoryScanner]:
    """Instantiate every built-in scanner, in category order."""
    return [
        CachesScanner(context),
        LogsScanner(context),
        ToolchainScanner(context),
        PackageManagersScanner(context),
        BrowserScanner(context),
        ContainersScanner(context),
        ProjectLeftoversScanner(context, extra_roots=settings.string_list("project_leftovers.extra_roots")),
        LargeFilesScanner(context, extra_roots=settings.string_list("large_files.extra_roots")),
        TrashScanner(context),
    ]


def load_scanners(
    registry: ScannerRegistry,
    context: ScanContext | None = None,
    settings: Settings | None = None,
) -> None:
    """Register the built-in scanners that settings have not disabled.

    Threshold overrides from settings replace each scanner's minimum size.
    """
    settings = settings or Settings.instance()
    context = context or build_context(settings)
    disabled = settings.disabled_scanners()

    for scanner in _builtin_scanners(context, settings):
        if scanner.id in disabled:
            log.info("Scanner '%s' disabled in settings", scanner.id)
            continue
        threshold = settings.threshold(scanner.id)
        if threshold is not None:
            scanner.min_size = threshold
        registry.register(scanner)

    log.info("Loaded %d scanners", len(registry))

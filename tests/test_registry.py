"""Tests for the scanner registry, loader and settings."""

from __future__ import annotations

import json

import pytest

from reclaim.core.registry import ScannerRegistry
from reclaim.core.scanner_loader import load_scanners
from reclaim.models.category import Category
from reclaim.scanners.caches import CachesScanner
from reclaim.scanners.project_leftovers import ProjectLeftoversScanner
from reclaim.settings import DEFAULTS, Settings


class BrokenScanner(CachesScanner):
    def is_available(self) -> bool:
        raise RuntimeError("boom")


@pytest.fixture
def settings(tmp_path):
    return Settings(tmp_path / "settings.json")


class TestScannerRegistry:
    def test_register_and_lookup(self, context):
        registry = ScannerRegistry()
        scanner = CachesScanner(context)
        registry.register(scanner)

        assert len(registry) == 1
        assert "caches" in registry
        assert registry.get("caches") is scanner
        assert registry.get_by_category(Category.CACHES) is scanner
        assert registry.get_by_category(Category.LOGS) is None
        assert registry.get("missing") is None

    def test_duplicate_is_ignored(self, context):
        registry = ScannerRegistry()
        first = CachesScanner(context)
        registry.register(first)
        registry.register(CachesScanner(context))

        assert registry.get_all() == [first]

    def test_availability_errors_are_contained(self, context, home):
        (home / ".cache").mkdir()
        registry = ScannerRegistry()
        registry.register(BrokenScanner(context))

        assert registry.get_available() == []


class TestLoadScanners:
    def test_registers_all_categories_in_order(self, context, settings):
        registry = ScannerRegistry()
        load_scanners(registry, context, settings)

        assert [s.category for s in registry] == list(Category)

    def test_disabled_scanners_skipped(self, context, settings):
        settings.set("scanners.disabled", ["containers", "large_files"])
        registry = ScannerRegistry()
        load_scanners(registry, context, settings)

        assert "containers" not in registry
        assert "large_files" not in registry
        assert len(registry) == len(Category) - 2

    def test_threshold_override(self, context, settings):
        settings.set("thresholds.caches", 123)
        settings.set("thresholds.logs", "not a number")
        registry = ScannerRegistry()
        load_scanners(registry, context, settings)

        assert registry.get("caches").min_size == 123
        assert registry.get("logs").min_size == 100_000

    def test_extra_roots_reach_scanner(self, context, settings, tmp_path):
        (tmp_path / "work").mkdir()
        settings.set("project_leftovers.extra_roots", [str(tmp_path / "work")])
        registry = ScannerRegistry()
        load_scanners(registry, context, settings)

        scanner = registry.get("project_leftovers")
        assert isinstance(scanner, ProjectLeftoversScanner)
        assert tmp_path / "work" in scanner.roots


class TestSettings:
    def test_defaults(self, settings):
        assert settings.get("scanners.disabled") == []
        assert settings.get("protected.extra_paths") == []
        assert settings.get("missing.key", "fallback") == "fallback"

    def test_defaults_are_not_shared(self, settings):
        settings.get("scanners.disabled").append("caches")
        assert DEFAULTS["scanners"]["disabled"] == []

    def test_set_persists(self, tmp_path):
        path = tmp_path / "settings.json"
        Settings(path).set("thresholds.browser", 1_000)

        assert json.loads(path.read_text()) == {"thresholds": {"browser": 1_000}}
        assert Settings(path).threshold("browser") == 1_000

    def test_damaged_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{broken")

        assert Settings(path).get("scanners.disabled") == []

    def test_non_object_file_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")

        assert Settings(path).disabled_scanners() == set()

    def test_negative_threshold_ignored(self, settings):
        settings.set("thresholds.trash", -5)
        assert settings.threshold("trash") is None

    def test_string_list_rejects_non_lists(self, settings):
        settings.set("large_files.extra_roots", "/data")
        assert settings.string_list("large_files.extra_roots") == []

    def test_instance_uses_xdg_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        assert Settings.instance().path == tmp_path / "cfg" / "reclaim" / "settings.json"

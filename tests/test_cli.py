"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

import reclaim.cli as cli
from conftest import write_file
from reclaim.core.tracker import Tracker

pytestmark = pytest.mark.usefixtures("isolate_storage")


@pytest.fixture
def config(tmp_path):
    return tmp_path / "settings.json"


@pytest.fixture
def invoke(context, config, monkeypatch):
    monkeypatch.setattr(cli, "build_context", lambda settings: context)
    runner = CliRunner()

    def _invoke(*args, input=None):
        return runner.invoke(cli.main, ["--config", str(config), *args], input=input)

    return _invoke


@pytest.fixture
def app_cache(home):
    cache = home / ".cache" / "someapp"
    write_file(cache / "blob.bin", 2_000_000)
    return cache


class TestScan:
    def test_json_output(self, invoke, app_cache):
        result = invoke("scan", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_bytes"] >= 2_000_000
        caches = next(r for r in data["results"] if r["category"] == "caches")
        assert caches["items"][0]["path"] == str(app_cache)
        assert caches["items"][0]["selected"] is True

    def test_scan_never_deletes(self, invoke, app_cache):
        invoke("scan")
        assert app_cache.exists()

    def test_nothing_found(self, invoke, home):
        result = invoke("scan")

        assert result.exit_code == 0
        assert "Nothing to clean." in result.output


class TestClean:
    def test_yes_removes_selected(self, invoke, app_cache):
        result = invoke("clean", "--yes")

        assert result.exit_code == 0, result.output
        assert not app_cache.exists()
        assert "Freed" in result.output
        assert Tracker().read().total_passes == 1

    def test_dry_run_keeps_everything(self, invoke, app_cache):
        result = invoke("clean", "--dry-run", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "dry_run"
        assert data["removed_count"] == 1
        assert app_cache.exists()
        assert Tracker().read().total_passes == 0

    def test_declined_confirmation(self, invoke, app_cache):
        result = invoke("clean", input="n\n")

        assert "Aborted." in result.output
        assert app_cache.exists()

    def test_nothing_selected(self, invoke, home):
        result = invoke("clean", "--json")

        assert json.loads(result.output)["status"] == "nothing_selected"

    def test_all_skips_large_files(self, invoke, home, monkeypatch):
        big = home / "Downloads" / "movie.mkv"
        big.parent.mkdir(parents=True)
        with open(big, "wb") as f:
            f.truncate(1)
        monkeypatch.setattr("reclaim.scanners.large_files.allocated_size", lambda st: 200_000_000)

        result = invoke("clean", "--all", "--json")

        data = json.loads(result.output)
        assert data["status"] == "nothing_selected"
        assert [r["category"] for r in data["results"]] == ["large_files"]
        assert big.exists()


class TestCategories:
    def test_json_lists_every_category(self, invoke, runner):
        runner._available = False
        result = invoke("categories", "--json")

        data = {row["id"]: row for row in json.loads(result.output)}
        assert len(data) == 9
        assert data["containers"]["status"] == "Docker is not installed"
        assert data["large_files"]["auto_select"] is False

    def test_disabled_category(self, invoke, config):
        config.write_text(json.dumps({"scanners": {"disabled": ["trash"]}}))

        data = {row["id"]: row for row in json.loads(invoke("categories", "--json").output)}

        assert data["trash"]["status"] == "disabled"
        assert data["trash"]["min_size"] is None


class TestCheck:
    def test_protected_path_exits_nonzero(self, invoke, home):
        result = invoke("check", str(home / ".ssh" / "id_ed25519"))

        assert result.exit_code == 1
        assert "protected" in result.output

    def test_ordinary_path(self, invoke, home):
        result = invoke("check", str(home / ".cache" / "someapp"))

        assert result.exit_code == 0
        assert "not protected" in result.output

    def test_extra_protected_path(self, config, home, monkeypatch):
        monkeypatch.setenv("HOME", str(home))
        config.write_text(json.dumps({"protected": {"extra_paths": ["~/keep"]}}))

        result = CliRunner().invoke(cli.main, ["--config", str(config), "check", str(home / "keep" / "a")])

        assert result.exit_code == 1


class TestStats:
    def test_json(self, invoke):
        Tracker().record(4096, 2)

        data = json.loads(invoke("stats", "--json").output)

        assert data["bytes_freed"] == 4096
        assert data["items_removed"] == 2
        assert data["pass_count"] == 1

    def test_text_without_history(self, invoke):
        result = invoke("stats", "--period", "today")

        assert result.exit_code == 0
        assert "never" in result.output

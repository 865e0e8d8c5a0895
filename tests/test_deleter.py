"""Tests for the deletion policy engine."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeOracle, FakeRunner, write_file
from reclaim.core.deleter import PRUNE_COMMANDS, SafeDeleter
from reclaim.core.protected import ProtectedPaths
from reclaim.core.tools import CommandResult
from reclaim.errors import PolicyError
from reclaim.models.category import Category, DeletionMethod
from reclaim.models.scan_result import CandidateItem


def _item(path: Path, category: Category = Category.CACHES, size: int = 1_000, **kwargs) -> CandidateItem:
    return CandidateItem(path=path, name=kwargs.pop("name", path.name), size_bytes=size, category=category, **kwargs)


@pytest.fixture
def deleter(home, oracle, runner, audit):
    return SafeDeleter(ProtectedPaths(home=home), oracle, runner, audit)


def _audit_lines(audit) -> list[str]:
    audit.flush()
    lines: list[str] = []
    for log_file in sorted(audit.directory.glob("*.log")):
        lines.extend(log_file.read_text().splitlines())
    return lines


class TestSafeDeleter:
    def test_empty_selection_is_a_no_op(self, deleter):
        outcome = deleter.clean([])
        assert outcome.removed_count == 0
        assert outcome.freed_bytes == 0
        assert outcome.failures == []

    def test_permanent_delete_of_directory_and_file(self, deleter, home):
        folder = home / "Library" / "Caches" / "com.example.app"
        write_file(folder / "nested" / "data.bin", 5_000)
        loose = write_file(home / "Library" / "Logs" / "old.log", 100)

        outcome = deleter.clean([_item(folder, size=5_000), _item(loose, Category.LOGS, size=100)])

        assert not folder.exists()
        assert not loose.exists()
        assert outcome.removed_count == 2
        assert outcome.freed_bytes == 5_100
        assert outcome.removed_paths == [folder, loose]

    def test_symlink_is_unlinked_not_followed(self, deleter, home, tmp_path):
        target = write_file(tmp_path / "keep" / "precious.bin", 1_000)
        link = home / ".cache" / "link"
        link.parent.mkdir(parents=True)
        link.symlink_to(target.parent)

        outcome = deleter.clean([_item(link)])

        assert outcome.removed_count == 1
        assert not link.exists() and not link.is_symlink()
        assert target.exists()

    def test_protected_path_is_refused(self, deleter, home):
        keys = write_file(home / ".ssh" / "id_rsa", 100)

        outcome = deleter.clean([_item(keys.parent, name="SSH")])

        assert keys.exists()
        assert outcome.removed_count == 0
        assert outcome.failures == ["SSH: skipped: protected"]

    def test_running_app_is_skipped(self, home, runner, audit):
        folder = write_file(home / "Library" / "Caches" / "com.spotify.client" / "x", 100).parent
        deleter = SafeDeleter(ProtectedPaths(home=home), FakeOracle({"Spotify"}), runner, audit)
        item = _item(folder, name="Spotify", app_name="Spotify", app_id="com.spotify.client")

        outcome = deleter.clean([item])

        assert folder.exists()
        assert outcome.failures == ["Spotify: in use - skipped"]

    def test_liveness_exempt_categories_ignore_running_apps(self, home, runner, audit):
        folder = write_file(home / "Code" / "app" / "node_modules" / "x.js", 100).parent
        deleter = SafeDeleter(ProtectedPaths(home=home), FakeOracle({"node"}), runner, audit)
        item = _item(folder, Category.PROJECT_LEFTOVERS, app_name="node", app_id="node")

        outcome = deleter.clean([item])

        assert outcome.removed_count == 1
        assert not folder.exists()

    def test_items_without_app_skip_liveness(self, home, runner, audit):
        folder = write_file(home / ".npm" / "blob", 100).parent
        deleter = SafeDeleter(ProtectedPaths(home=home), FakeOracle({"npm"}), runner, audit)

        outcome = deleter.clean([_item(folder, Category.PACKAGE_MANAGERS)])

        assert outcome.removed_count == 1

    def test_empty_contents_keeps_directory(self, deleter, home):
        trash = home / ".local" / "share" / "Trash"
        write_file(trash / "files" / "a.txt", 10)
        write_file(trash / "b.txt", 10)

        outcome = deleter.clean([_item(trash, Category.TRASH, size=20, name="Trash (2 items)")])

        assert trash.is_dir()
        assert list(trash.iterdir()) == []
        assert outcome.removed_count == 1
        assert outcome.freed_bytes == 20

    def test_empty_contents_of_missing_directory_fails(self, deleter, home):
        outcome = deleter.clean([_item(home / ".Trash", Category.TRASH, name="Trash (0 items)")])
        assert outcome.removed_count == 0
        assert outcome.failures == ["Trash (0 items): not a directory"]

    @pytest.mark.parametrize("kind", sorted(PRUNE_COMMANDS))
    def test_external_tool_prunes_each_kind(self, home, oracle, audit, kind):
        runner = FakeRunner()
        deleter = SafeDeleter(ProtectedPaths(home=home), oracle, runner, audit)
        item = _item(Path(f"/var/run/docker/{kind}"), Category.CONTAINERS, size=500, tool_kind=kind)

        outcome = deleter.clean([item])

        assert runner.calls == [PRUNE_COMMANDS[kind]]
        assert outcome.removed_count == 1
        assert outcome.freed_bytes == 500

    def test_prune_command_mapping(self):
        assert PRUNE_COMMANDS == {
            "images": ["image", "prune", "-f"],
            "containers": ["container", "prune", "-f"],
            "build_cache": ["builder", "prune", "-f"],
        }

    def test_unknown_tool_kind_runs_nothing(self, home, oracle, audit):
        runner = FakeRunner()
        deleter = SafeDeleter(ProtectedPaths(home=home), oracle, runner, audit)
        item = _item(Path("/var/run/docker/volumes"), Category.CONTAINERS, name="Volumes", tool_kind="volumes")

        outcome = deleter.clean([item, _item(Path("/var/run/docker/other"), Category.CONTAINERS, name="Other")])

        assert runner.calls == []
        assert outcome.removed_count == 0
        assert outcome.failures == ["Volumes: cannot be removed with docker", "Other: cannot be removed with docker"]

    def test_backing_store_is_refused(self, deleter, home):
        store = write_file(home / "Library" / "Containers" / "com.docker.docker" / "Data" / "disk.raw", 100).parent
        item = _item(store, Category.CONTAINERS, name="Docker Desktop data", selected=False)

        outcome = deleter.clean([item])

        assert store.exists()
        assert outcome.failures == ["Docker Desktop data: skipped: protected"]

    def test_failed_tool_is_a_failure(self, home, oracle, audit):
        runner = FakeRunner({tuple(PRUNE_COMMANDS["images"]): CommandResult("", "daemon not running", 1)})
        deleter = SafeDeleter(ProtectedPaths(home=home), oracle, runner, audit)
        item = _item(Path("/var/run/docker/images"), Category.CONTAINERS, name="Dangling images", tool_kind="images")

        outcome = deleter.clean([item])

        assert outcome.removed_count == 0
        assert outcome.failures == ["Dangling images: docker image prune failed: daemon not running"]

    def test_missing_tool_is_a_failure(self, home, oracle, audit):
        deleter = SafeDeleter(ProtectedPaths(home=home), oracle, FakeRunner(available=False), audit)
        item = _item(Path("/var/run/docker/images"), Category.CONTAINERS, tool_kind="images")

        outcome = deleter.clean([item])

        assert outcome.removed_count == 0
        assert len(outcome.failures) == 1

    def test_move_to_trash(self, deleter, home, monkeypatch):
        trashed: list[str] = []
        monkeypatch.setattr("reclaim.core.deleter.send2trash", trashed.append)
        big = write_file(home / "Downloads" / "movie.mkv", 1_000)

        outcome = deleter.clean([_item(big, Category.LARGE_FILES, size=1_000, selected=False)])

        assert trashed == [str(big)]
        assert outcome.removed_count == 1

    def test_trash_failure_is_recorded(self, deleter, home, monkeypatch):
        def refuse(path):
            raise PermissionError("trash not writable")

        monkeypatch.setattr("reclaim.core.deleter.send2trash", refuse)
        big = write_file(home / "Downloads" / "movie.mkv", 1_000)

        outcome = deleter.clean([_item(big, Category.LARGE_FILES)])

        assert big.exists()
        assert outcome.failures == ["movie.mkv: trash not writable"]

    def test_failure_does_not_stop_the_pass(self, deleter, home):
        keys = write_file(home / ".ssh" / "config", 10).parent
        missing_trash = home / "nowhere"
        cache = write_file(home / ".cache" / "app" / "data", 10).parent

        outcome = deleter.clean(
            [
                _item(keys, name="keys", size=10),
                _item(missing_trash, Category.TRASH, name="trash", size=10),
                _item(cache, name="cache", size=10),
            ]
        )

        assert outcome.removed_count == 1
        assert outcome.removed_paths == [cache]
        assert outcome.freed_bytes == 10
        assert len(outcome.failures) == 2

    def test_freed_bytes_are_declared_sizes(self, deleter, home):
        folder = write_file(home / ".cache" / "app" / "data", 10).parent

        outcome = deleter.clean([_item(folder, size=123_456)])

        assert outcome.freed_bytes == 123_456

    def test_missing_handler_raises_policy_error(self, deleter, home):
        del deleter._handlers[DeletionMethod.PERMANENT]

        with pytest.raises(PolicyError):
            deleter.clean([_item(home / ".cache" / "x")])

    def test_dry_run_touches_nothing(self, home, oracle, audit):
        runner = FakeRunner()
        deleter = SafeDeleter(ProtectedPaths(home=home), oracle, runner, audit, dry_run=True)
        folder = write_file(home / ".cache" / "app" / "data", 10).parent
        keys = write_file(home / ".ssh" / "id_rsa", 10)
        docker = _item(Path("/var/run/docker/images"), Category.CONTAINERS, tool_kind="images")

        outcome = deleter.clean([_item(folder, size=10), _item(keys, name="key"), docker])

        assert folder.exists()
        assert runner.calls == []
        assert outcome.removed_count == 2
        assert outcome.failures == ["key: skipped: protected"]

    def test_every_attempt_is_audited(self, deleter, home, audit):
        folder = write_file(home / ".cache" / "app" / "data", 10).parent
        keys = write_file(home / ".ssh" / "id_rsa", 10)

        deleter.clean([_item(folder, size=2048), _item(keys)])

        lines = _audit_lines(audit)
        assert len(lines) == 2
        assert "DELETE 2.0 KB" in lines[0] and str(folder) in lines[0]
        assert lines[1].startswith("[") and "SKIP" in lines[1] and lines[1].endswith("- protected")

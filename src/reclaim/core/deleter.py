"""Policy-checked removal of scanned items.

Every item is checked again right before it is touched: the guard may
have gained roots since the scan and applications may have started.
Each category's deletion method decides how the item goes away.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

from send2trash import send2trash

from reclaim.core.audit import AuditLog
from reclaim.core.liveness import LivenessOracle, app_running
from reclaim.core.protected import ProtectedPaths
from reclaim.core.tools import ToolRunner
from reclaim.errors import PolicyError
from reclaim.models.category import DeletionMethod
from reclaim.models.clean_result import CleanOutcome
from reclaim.models.scan_result import CandidateItem

log = logging.getLogger(__name__)

# Container sub-kind -> docker arguments that prune it
PRUNE_COMMANDS: dict[str, list[str]] = {
    "images": ["image", "prune", "-f"],
    "containers": ["container", "prune", "-f"],
    "build_cache": ["builder", "prune", "-f"],
}

_AUDIT_ACTIONS = {
    DeletionMethod.PERMANENT: "delete",
    DeletionMethod.EMPTY_CONTENTS: "empty-trash",
    DeletionMethod.EXTERNAL_TOOL: "prune",
    DeletionMethod.MOVE_TO_TRASH: "trash",
}


class _ActionFailed(Exception):
    """An item could not be removed for a reason other than an OS error."""


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


class SafeDeleter:
    """Removes items one at a time, never stopping on a failed item.

    Args:
        guard: Protected-path guard consulted before every removal.
        oracle: Liveness oracle consulted for items tied to an application.
        runner: Tool runner used for container pruning.
        audit: Audit log receiving one line per attempt.
        dry_run: Report what would be removed without touching anything.
    """

    def __init__(
        self,
        guard: ProtectedPaths,
        oracle: LivenessOracle,
        runner: ToolRunner,
        audit: AuditLog | None = None,
        dry_run: bool = False,
    ) -> None:
        self.guard = guard
        self.oracle = oracle
        self.runner = runner
        self.audit = audit if audit is not None else AuditLog()
        self.dry_run = dry_run
        self._handlers: dict[DeletionMethod, Callable[[CandidateItem], None]] = {
            DeletionMethod.PERMANENT: self._delete_permanently,
            DeletionMethod.EMPTY_CONTENTS: self._empty_contents,
            DeletionMethod.EXTERNAL_TOOL: self._prune_with_tool,
            DeletionMethod.MOVE_TO_TRASH: self._move_to_trash,
        }

    def clean(self, items: Iterable[CandidateItem]) -> CleanOutcome:
        """Remove *items* in order and report what happened.

        Raises:
            PolicyError: An item's category has no deletion handler.
        """
        outcome = CleanOutcome()
        for item in items:
            self._clean_item(item, outcome)
        log.info(
            "Clean pass finished: %d removed, %d bytes, %d failures",
            outcome.removed_count,
            outcome.freed_bytes,
            len(outcome.failures),
        )
        return outcome

    def _clean_item(self, item: CandidateItem, outcome: CleanOutcome) -> None:
        method = item.category.deletion_method
        handler = self._handlers.get(method)
        if handler is None:
            raise PolicyError(f"No deletion handler for {item.category.id} ({method})")

        if self.guard.is_forbidden(item.path):
            self._fail(outcome, item, f"{item.name}: skipped: protected", "skip", "protected")
            return

        if not item.category.liveness_exempt and app_running(
            self.oracle, item.app_id, item.app_name, item.path.name
        ):
            app = item.app_name or item.name
            self._fail(outcome, item, f"{app}: in use - skipped", "skip", "in use")
            return

        if self.dry_run:
            outcome.record_removed(item.path, item.size_bytes)
            self.audit.append("dry-run", item.path, item.size_bytes, _AUDIT_ACTIONS[method])
            return

        try:
            handler(item)
        except (OSError, _ActionFailed) as e:
            self._fail(outcome, item, f"{item.name}: {e}", "error", str(e))
            return

        outcome.record_removed(item.path, item.size_bytes)
        self.audit.append(_AUDIT_ACTIONS[method], item.path, item.size_bytes)
        log.debug("Removed %s (%d bytes)", item.path, item.size_bytes)

    def _fail(self, outcome: CleanOutcome, item: CandidateItem, message: str, action: str, note: str) -> None:
        outcome.failures.append(message)
        self.audit.append(action, item.path, item.size_bytes, note)
        log.info("Not removed: %s", message)

    def _delete_permanently(self, item: CandidateItem) -> None:
        _remove_path(item.path)

    def _empty_contents(self, item: CandidateItem) -> None:
        if not item.path.is_dir():
            raise _ActionFailed("not a directory")
        with os.scandir(item.path) as it:
            children = [Path(entry.path) for entry in it]
        for child in children:
            _remove_path(child)

    def _prune_with_tool(self, item: CandidateItem) -> None:
        args = PRUNE_COMMANDS.get(item.tool_kind or "")
        if args is None:
            raise _ActionFailed(f"cannot be removed with {self.runner.name}")
        result = self.runner.run(args)
        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise _ActionFailed(f"{self.runner.name} {' '.join(args[:2])} failed: {detail}")

    def _move_to_trash(self, item: CandidateItem) -> None:
        send2trash(str(item.path))

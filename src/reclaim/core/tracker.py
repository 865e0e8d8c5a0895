"""Tracks freed space across clean passes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from reclaim.storage import load_history, save_history

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LifetimeStats:
    """Totals over every recorded clean pass."""

    total_bytes: int
    total_items: int
    total_passes: int
    last_timestamp: str | None


class Tracker:
    """Records and persists clean-pass statistics."""

    def record(self, bytes_freed: int, item_count: int) -> None:
        """Persist one clean pass."""
        history = load_history()
        history["sessions"].append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "bytes_freed": bytes_freed,
                "items_removed": item_count,
            }
        )
        save_history(history)
        log.info("Recorded clean pass: %d bytes freed from %d items", bytes_freed, item_count)

    def read(self) -> LifetimeStats:
        """Return lifetime totals."""
        sessions = load_history()["sessions"]
        return LifetimeStats(
            total_bytes=sum(_session_bytes(s) for s in sessions),
            total_items=sum(_session_items(s) for s in sessions),
            total_passes=len(sessions),
            last_timestamp=sessions[-1].get("timestamp") if sessions else None,
        )

    def get_stats(self, period: str = "all") -> dict[str, Any]:
        """Get aggregated statistics for a time period.

        Args:
            period: One of 'today', 'week', 'month', 'all'.
        """
        all_sessions = load_history()["sessions"]

        match period:
            case "today":
                cutoff = _start_of_today()
            case "week":
                cutoff = _start_of_today() - timedelta(days=7)
            case "month":
                cutoff = _start_of_today() - timedelta(days=30)
            case _:
                cutoff = None

        if cutoff is not None:
            sessions = [s for s in all_sessions if _session_time(s) >= cutoff]
        else:
            sessions = all_sessions

        return {
            "period": period,
            "bytes_freed": sum(_session_bytes(s) for s in sessions),
            "items_removed": sum(_session_items(s) for s in sessions),
            "pass_count": len(sessions),
            "lifetime_bytes_freed": sum(_session_bytes(s) for s in all_sessions),
            "last_clean": all_sessions[-1].get("timestamp") if all_sessions else None,
        }


def _session_bytes(session: dict[str, Any]) -> int:
    return int(session.get("bytes_freed", 0))


def _session_items(session: dict[str, Any]) -> int:
    return int(session.get("items_removed", 0))


def _session_time(session: dict[str, Any]) -> datetime:
    try:
        return datetime.fromisoformat(session["timestamp"])
    except (KeyError, TypeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)


def _start_of_today() -> datetime:
    """Return the start of the current UTC day."""
    now = datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)

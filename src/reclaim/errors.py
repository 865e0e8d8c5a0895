"""Exceptions raised for internal invariant violations.

User-facing problems (protected paths, running apps, filesystem errors)
are never raised; they end up as notes in a CleanOutcome.
"""

from __future__ import annotations


class ReclaimError(Exception):
    """Base class for reclaim errors."""


class InvalidTransition(ReclaimError):
    """Raised when an engine operation is not allowed in the current state."""


class PolicyError(ReclaimError):
    """Raised when a category has no defined deletion method."""

"""Reclaim data models."""

from reclaim.models.category import Category, DeletionMethod
from reclaim.models.clean_result import CleanOutcome
from reclaim.models.scan_result import CandidateItem, ScanResult
from reclaim.models.scanner import CategoryScanner, FixedPathScanner, ScanContext, SubdirectoryScanner, Target

__all__ = [
    "CandidateItem",
    "Category",
    "CategoryScanner",
    "CleanOutcome",
    "DeletionMethod",
    "FixedPathScanner",
    "ScanContext",
    "ScanResult",
    "SubdirectoryScanner",
    "Target",
]

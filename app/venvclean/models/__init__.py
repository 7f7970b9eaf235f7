"""Data models for venvclean.

This module exports the core data structures used throughout the application.
"""

from venvclean.models.entry import SortMode, VenvEntry, selected_entries, sort_entries
from venvclean.models.progress import DeletionProgress, DeletionResult, ScanProgress

__all__ = [
    "DeletionProgress",
    "DeletionResult",
    "ScanProgress",
    "SortMode",
    "VenvEntry",
    "selected_entries",
    "sort_entries",
]

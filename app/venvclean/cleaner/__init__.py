"""Removal of selected virtual environments.

This module provides removal tool detection and the deletion executor
that streams progress to a consumer.
"""

from venvclean.cleaner.executor import DeletionExecutor, DeletionRun, report_failure
from venvclean.cleaner.tools import (
    RemovalError,
    RemovalTool,
    detect_removal_tool,
    remove_directory,
)

__all__ = [
    "DeletionExecutor",
    "DeletionRun",
    "RemovalError",
    "RemovalTool",
    "detect_removal_tool",
    "remove_directory",
    "report_failure",
]

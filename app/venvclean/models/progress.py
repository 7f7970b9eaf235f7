"""Progress snapshots and results streamed between threads.

All types here are immutable so that a snapshot handed over a channel
can never change underneath the consumer.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Snapshot of a running scan.

    Counters never decrease within one scan.

    Attributes:
        current_path: Directory the walker is currently at.
        repos_found: Repositories with a virtual environment found so far.
        folders_scanned: Directories visited so far.
    """

    current_path: str
    repos_found: int
    folders_scanned: int


@dataclass(frozen=True, slots=True)
class DeletionProgress:
    """Snapshot of a running deletion batch.

    Attributes:
        current: Entries attempted so far, successful or not.
        total: Number of selected entries in the batch.
        bytes_freed: Cumulative size of successfully removed entries.
        removed: Entries successfully removed so far.
    """

    current: int
    total: int
    bytes_freed: int
    removed: int


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of removing a single virtual environment.

    Attributes:
        path: Directory that was operated on.
        success: Whether the directory was removed.
        error: Error message if the removal failed, None otherwise.
        size_bytes: Recorded size of the entry.
    """

    path: str
    success: bool
    error: str | None = None
    size_bytes: int = 0

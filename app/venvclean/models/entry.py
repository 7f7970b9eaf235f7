"""Virtual environment entry model.

This module defines the data structure for a repository/``.venv`` pair
discovered during scanning, along with the sort orders the selection
view offers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class SortMode(str, Enum):
    """Ordering of discovered entries in the selection list.

    Attributes:
        TIME: Most recently modified first.
        SIZE: Largest first.
        NAME: Repository path, A to Z.
    """

    TIME = "time"
    SIZE = "size"
    NAME = "name"

    @property
    def label(self) -> str:
        """Human-readable description of the ordering."""
        return _SORT_LABELS[self]


_SORT_LABELS: dict[SortMode, str] = {
    SortMode.TIME: "Time (newest first)",
    SortMode.SIZE: "Size (largest first)",
    SortMode.NAME: "Name (A-Z)",
}


@dataclass(slots=True)
class VenvEntry:
    """A git repository containing a virtual environment directory.

    Entries are created by the repository detector and handed to the
    consumer. After handoff only ``selected`` is ever changed, and only
    by the consumer.

    Attributes:
        repo_path: Absolute path of the repository root.
        venv_path: Absolute path of the virtual environment directory.
        has_pyproject: Whether a pyproject.toml sits at the repository root.
        last_modified: Newest modification time found inside the environment.
        size_bytes: Total size of regular files inside the environment.
        selected: Whether the entry is marked for deletion.
    """

    repo_path: str
    venv_path: str
    has_pyproject: bool
    last_modified: datetime
    size_bytes: int
    selected: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.repo_path:
            msg = "Repository path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size must be non-negative, got {self.size_bytes}"
            raise ValueError(msg)

    def toggle(self) -> None:
        """Flip the selection state."""
        self.selected = not self.selected


def sort_entries(entries: list[VenvEntry], mode: SortMode) -> None:
    """Sort entries in place according to the given mode.

    Args:
        entries: Entries to reorder.
        mode: Ordering to apply.
    """
    if mode == SortMode.TIME:
        entries.sort(key=lambda e: e.last_modified, reverse=True)
    elif mode == SortMode.SIZE:
        entries.sort(key=lambda e: e.size_bytes, reverse=True)
    else:
        entries.sort(key=lambda e: e.repo_path)


def selected_entries(entries: list[VenvEntry]) -> list[VenvEntry]:
    """Return the selected entries, preserving order."""
    return [e for e in entries if e.selected]

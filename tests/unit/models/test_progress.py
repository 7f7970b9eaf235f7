"""Unit tests for progress snapshot models."""

import dataclasses

import pytest
from venvclean.models.progress import DeletionProgress, DeletionResult, ScanProgress


class TestImmutability:
    """Snapshots cannot change after they are sent."""

    def test_scan_progress_frozen(self) -> None:
        """ScanProgress fields cannot be reassigned."""
        progress = ScanProgress(current_path="/src", repos_found=0, folders_scanned=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            progress.repos_found = 2  # type: ignore[misc]

    def test_deletion_progress_frozen(self) -> None:
        """DeletionProgress fields cannot be reassigned."""
        progress = DeletionProgress(current=1, total=2, bytes_freed=10, removed=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            progress.bytes_freed = 0  # type: ignore[misc]


def test_deletion_result_defaults() -> None:
    """A successful result carries no error."""
    result = DeletionResult(path="/src/a/.venv", success=True)

    assert result.error is None
    assert result.size_bytes == 0

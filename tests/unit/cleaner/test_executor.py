"""Unit tests for the deletion executor."""

import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from venvclean.cleaner.executor import DeletionExecutor, report_failure
from venvclean.cleaner.tools import RemovalTool
from venvclean.models.entry import VenvEntry
from venvclean.models.progress import DeletionProgress, DeletionResult

GIB = 1024**3

ToolInstaller = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def native_removal() -> Iterator[MagicMock]:
    """Remove in-process regardless of which tools are installed."""
    with patch(
        "venvclean.cleaner.executor.detect_removal_tool",
        return_value=RemovalTool.NATIVE,
    ) as mock_detect:
        yield mock_detect


def _entry(tmp_path: Path, name: str, size: int, *, selected: bool = True) -> VenvEntry:
    venv = tmp_path / name / ".venv"
    venv.mkdir(parents=True)
    (venv / "pyvenv.cfg").write_text("home = /usr/bin\n")
    return VenvEntry(
        repo_path=str(tmp_path / name),
        venv_path=str(venv),
        has_pyproject=True,
        last_modified=datetime(2026, 1, 1, tzinfo=UTC),
        size_bytes=size,
        selected=selected,
    )


def _run(
    entries: list[VenvEntry], executor: DeletionExecutor | None = None
) -> tuple[list[DeletionProgress], list[DeletionResult]]:
    run = (executor or DeletionExecutor(on_failure=lambda _: None)).start(entries)
    snapshots = list(run.progress)
    return snapshots, run.results(timeout=5)


class TestDeletionExecutor:
    """Tests for DeletionExecutor."""

    def test_removes_selected_only(self, tmp_path: Path) -> None:
        """Unselected entries are left on disk."""
        keep = _entry(tmp_path, "keep", 10, selected=False)
        drop = _entry(tmp_path, "drop", 10)

        _, results = _run([keep, drop])

        assert [r.path for r in results] == [drop.venv_path]
        assert Path(keep.venv_path).exists()
        assert not Path(drop.venv_path).exists()

    def test_progress_after_every_entry(self, tmp_path: Path) -> None:
        """Snapshots count attempts and accumulate freed bytes."""
        small = _entry(tmp_path, "small", 10 * 1024**2)
        large = _entry(tmp_path, "large", 2 * GIB)

        snapshots, results = _run([small, large])

        assert snapshots == [
            DeletionProgress(current=1, total=2, bytes_freed=10 * 1024**2, removed=1),
            DeletionProgress(current=2, total=2, bytes_freed=10 * 1024**2 + 2 * GIB, removed=2),
        ]
        assert all(r.success for r in results)

    def test_only_large_entry_selected(self, tmp_path: Path) -> None:
        """Selecting just the 2 GB entry frees exactly its recorded size."""
        small = _entry(tmp_path, "small", 10 * 1024**2, selected=False)
        large = _entry(tmp_path, "large", 2 * GIB)

        snapshots, _ = _run([small, large])

        assert snapshots == [
            DeletionProgress(current=1, total=1, bytes_freed=2_147_483_648, removed=1)
        ]
        assert Path(small.venv_path).exists()

    def test_failure_does_not_stop_batch(self, tmp_path: Path) -> None:
        """A failed removal is reported and the batch continues."""
        missing = VenvEntry(
            repo_path=str(tmp_path / "gone"),
            venv_path=str(tmp_path / "gone" / ".venv"),
            has_pyproject=False,
            last_modified=datetime(2026, 1, 1, tzinfo=UTC),
            size_bytes=500,
            selected=True,
        )
        present = _entry(tmp_path, "present", 300)
        failures: list[DeletionResult] = []

        snapshots, results = _run([missing, present], DeletionExecutor(on_failure=failures.append))

        assert [r.success for r in results] == [False, True]
        assert len(failures) == 1
        assert failures[0].path == missing.venv_path
        assert failures[0].error is not None
        assert snapshots[-1] == DeletionProgress(current=2, total=2, bytes_freed=300, removed=1)

    @pytest.mark.skipif(os.name == "nt", reason="needs a POSIX shell")
    def test_undecodable_tool_output_does_not_abort_batch(
        self, tmp_path: Path, native_removal: MagicMock, fake_tool: ToolInstaller
    ) -> None:
        """Every entry is attempted even when the tool prints invalid UTF-8."""
        fake_tool("rm", "printf 'rm: cannot remove \\377\\376' >&2; exit 1")
        native_removal.return_value = RemovalTool.RM
        entries = [_entry(tmp_path, name, 100) for name in ("first", "second")]

        executor = DeletionExecutor(preferred_tool="rm", on_failure=lambda _: None)

        snapshots, results = _run(entries, executor)

        assert [r.success for r in results] == [False, False]
        assert all("rm exited with 1" in (r.error or "") for r in results)
        assert snapshots[-1] == DeletionProgress(current=2, total=2, bytes_freed=0, removed=0)
        assert all(Path(e.venv_path).exists() for e in entries)

    def test_deleting_twice_fails_second_time(self, tmp_path: Path) -> None:
        """An already removed entry is a failure on the next attempt."""
        entry = _entry(tmp_path, "once", 42)

        _run([entry])
        snapshots, results = _run([entry])

        assert results[0].success is False
        assert snapshots == [DeletionProgress(current=1, total=1, bytes_freed=0, removed=0)]

    def test_empty_selection_closes_immediately(
        self, tmp_path: Path, native_removal: MagicMock
    ) -> None:
        """With nothing selected the stream closes without snapshots."""
        entry = _entry(tmp_path, "idle", 1, selected=False)

        snapshots, results = _run([entry])

        assert snapshots == []
        assert results == []
        native_removal.assert_not_called()

    def test_tool_resolved_once_per_batch(self, tmp_path: Path, native_removal: MagicMock) -> None:
        """The removal tool is detected once, with the configured preference."""
        entries = [_entry(tmp_path, name, 1) for name in ("a", "b", "c")]

        _run(entries, DeletionExecutor(preferred_tool="rm"))

        native_removal.assert_called_once_with("rm")

    def test_selection_fixed_at_start(self, tmp_path: Path) -> None:
        """Toggling an entry after start() does not change the batch."""
        first = _entry(tmp_path, "first", 1)
        second = _entry(tmp_path, "second", 1)

        run = DeletionExecutor().start([first, second])
        second.toggle()
        list(run.progress)

        assert len(run.results(timeout=5)) == 2

    def test_consumer_closing_stream_stops_batch(self, tmp_path: Path) -> None:
        """Closing the progress stream ends the worker thread."""
        entries = [_entry(tmp_path, name, 1) for name in ("a", "b", "c")]

        run = DeletionExecutor().start(entries)
        run.progress.receive()
        run.progress.close()

        results = run.results(timeout=5)

        assert not run.thread.is_alive()
        assert len(results) < 3


class TestReportFailure:
    """Tests for the default failure handler."""

    def test_prints_to_stderr(self) -> None:
        """The default handler prints the path and error."""
        result = DeletionResult(path="/src/a/.venv", success=False, error="denied")

        with patch("venvclean.cleaner.executor.print_error") as mock_print:
            report_failure(result)

        mock_print.assert_called_once_with("Could not delete /src/a/.venv: denied")

    def test_escapes_markup_in_paths(self) -> None:
        """Brackets in a path are printed literally."""
        result = DeletionResult(path="/src/[red]proj/.venv", success=False, error="denied")

        with patch("venvclean.cleaner.executor.print_error") as mock_print:
            report_failure(result)

        mock_print.assert_called_once_with("Could not delete /src/\\[red]proj/.venv: denied")

"""Deletion executor for selected virtual environments.

Removes the selected entries one by one, publishing a progress snapshot
after each attempt. A failed removal is reported to a diagnostic
handler and never stops the batch.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from rich.markup import escape

from venvclean.cleaner.tools import RemovalError, RemovalTool, detect_removal_tool, remove_directory
from venvclean.core.channel import Channel, ChannelClosed
from venvclean.models.entry import VenvEntry, selected_entries
from venvclean.models.progress import DeletionProgress, DeletionResult
from venvclean.utils.formatting import print_error

logger = logging.getLogger(__name__)

FailureHandler = Callable[[DeletionResult], None]


def report_failure(result: DeletionResult) -> None:
    """Default diagnostic handler: log the failure and print it on stderr."""
    logger.debug("Deleting %s failed: %s", result.path, result.error)
    print_error(escape(f"Could not delete {result.path}: {result.error}"))


@dataclass(slots=True)
class DeletionRun:
    """A deletion batch running in a background thread.

    Attributes:
        progress: Progress snapshots; closed when the batch is done.
        thread: Thread running the batch.
    """

    progress: Channel[DeletionProgress]
    thread: threading.Thread
    _results: list[DeletionResult] = field(default_factory=list)

    def results(self, timeout: float | None = None) -> list[DeletionResult]:
        """Wait for the batch to finish and return one result per attempt."""
        self.thread.join(timeout)
        return list(self._results)


class DeletionExecutor:
    """Removes selected virtual environments.

    Args:
        preferred_tool: "auto" or a RemovalTool value; resolved once per batch.
        on_failure: Diagnostic handler for failed removals.
    """

    def __init__(
        self,
        preferred_tool: str = "auto",
        on_failure: FailureHandler | None = None,
    ) -> None:
        self._preferred_tool = preferred_tool
        self._on_failure = on_failure or report_failure

    def delete(
        self,
        entries: list[VenvEntry],
        sink: Channel[DeletionProgress],
    ) -> list[DeletionResult]:
        """Remove every selected entry and publish progress on ``sink``.

        Entries are processed in input order. ``current`` in each snapshot
        counts attempts, so the last snapshot always reaches ``total``;
        ``bytes_freed`` and ``removed`` only grow on success. ``sink`` is
        closed when the batch is done.

        Args:
            entries: Entries as held by the consumer; unselected ones are ignored.
            sink: Channel receiving DeletionProgress snapshots.

        Returns:
            One DeletionResult per selected entry.
        """
        return self._run_batch(selected_entries(entries), sink)

    def _run_batch(
        self,
        selected: list[VenvEntry],
        sink: Channel[DeletionProgress],
    ) -> list[DeletionResult]:
        if not selected:
            sink.close()
            return []

        try:
            tool = detect_removal_tool(self._preferred_tool)
            logger.info("Removing %d environment(s) using %s", len(selected), tool.value)
            return self._delete_all(selected, tool, sink)
        finally:
            sink.close()

    def start(self, entries: list[VenvEntry]) -> DeletionRun:
        """Run delete() in a background thread.

        Args:
            entries: Entries as held by the consumer.

        Returns:
            DeletionRun whose progress channel the caller must drain.
        """
        sink: Channel[DeletionProgress] = Channel("deletion progress")
        # Selection is fixed when the batch starts
        batch = selected_entries(entries)
        results: list[DeletionResult] = []

        def _target() -> None:
            try:
                results.extend(self._run_batch(batch, sink))
            except ChannelClosed:
                logger.debug("Deletion progress stream closed by consumer")

        thread = threading.Thread(target=_target, name="venvclean-delete", daemon=True)
        run = DeletionRun(progress=sink, thread=thread, _results=results)
        thread.start()
        return run

    def _delete_all(
        self,
        selected: list[VenvEntry],
        tool: RemovalTool,
        sink: Channel[DeletionProgress],
    ) -> list[DeletionResult]:
        results: list[DeletionResult] = []
        total = len(selected)
        bytes_freed = 0
        removed = 0

        for current, entry in enumerate(selected, start=1):
            result = self._delete_single(entry, tool)
            results.append(result)
            if result.success:
                bytes_freed += entry.size_bytes
                removed += 1
            else:
                self._on_failure(result)

            sink.send(
                DeletionProgress(
                    current=current,
                    total=total,
                    bytes_freed=bytes_freed,
                    removed=removed,
                )
            )

        return results

    @staticmethod
    def _delete_single(entry: VenvEntry, tool: RemovalTool) -> DeletionResult:
        try:
            remove_directory(entry.venv_path, tool)
        except RemovalError as e:
            return DeletionResult(
                path=entry.venv_path,
                success=False,
                error=str(e),
                size_bytes=entry.size_bytes,
            )
        logger.debug("Removed %s", entry.venv_path)
        return DeletionResult(path=entry.venv_path, success=True, size_bytes=entry.size_bytes)

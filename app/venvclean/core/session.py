"""Consumer-side session state and stream pumps.

The session is a small state machine driven by pipeline events (entry
arrived, progress arrived, stream closed) and user keys. It owns the
materialized entry list; background threads never touch it.

States::

    SCANNING --scan closed--> SELECTING (or DONE when nothing was found)
    SELECTING --enter--> CONFIRMING --y--> CLEANING --closed--> DONE
    CONFIRMING --n--> SELECTING
    any --q--> DONE
"""

import logging
import re
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum

from venvclean.cleaner.executor import DeletionRun
from venvclean.core.channel import Channel, ChannelClosed
from venvclean.models.entry import SortMode, VenvEntry, selected_entries, sort_entries
from venvclean.models.progress import DeletionProgress, ScanProgress
from venvclean.scanner.walker import ScanStreams

logger = logging.getLogger(__name__)

_TOGGLE_PATTERN = re.compile(r"^\d+(-\d+)?(\s*,\s*\d+(-\d+)?)*$")

SessionCallback = Callable[["Session"], None]


class SessionState(str, Enum):
    """Phase of an interactive cleanup session."""

    SCANNING = "scanning"
    SELECTING = "selecting"
    CONFIRMING = "confirming"
    CLEANING = "cleaning"
    DONE = "done"


class InvalidTransitionError(Exception):
    """Raised when an action is not allowed in the current state."""

    def __init__(self, state: SessionState, action: str) -> None:
        super().__init__(f"Cannot {action} while {state.value}")
        self.state = state
        self.action = action


@dataclass
class Session:
    """Materialized view of one scan-select-clean run.

    Attributes:
        root: Absolute path being scanned.
        sort_mode: Current ordering of ``entries``.
        state: Current phase.
        entries: Discovered entries, kept sorted by ``sort_mode``.
        scan_progress: Last scan snapshot received.
        deletion_progress: Last deletion snapshot received.
        quit_requested: Whether the user quit before cleaning finished.
    """

    root: str
    sort_mode: SortMode = SortMode.TIME
    state: SessionState = SessionState.SCANNING
    entries: list[VenvEntry] = field(default_factory=list)
    scan_progress: ScanProgress | None = None
    deletion_progress: DeletionProgress | None = None
    quit_requested: bool = False

    # -- pipeline events -------------------------------------------------

    def on_entry(self, entry: VenvEntry) -> None:
        """Add a discovered entry and keep the list sorted."""
        self.entries.append(entry)
        sort_entries(self.entries, self.sort_mode)

    def on_scan_progress(self, progress: ScanProgress) -> None:
        """Record the latest scan snapshot."""
        self.scan_progress = progress

    def on_scan_closed(self) -> None:
        """Leave SCANNING once the entry stream is closed."""
        if self.state != SessionState.SCANNING:
            return
        self.state = SessionState.SELECTING if self.entries else SessionState.DONE

    def on_deletion_progress(self, progress: DeletionProgress) -> None:
        """Record the latest deletion snapshot."""
        self.deletion_progress = progress

    def on_deletion_closed(self) -> None:
        """Finish the session once the deletion stream is closed."""
        if self.state == SessionState.CLEANING:
            self.state = SessionState.DONE

    # -- selection -------------------------------------------------------

    def toggle(self, index: int) -> None:
        """Toggle the entry at a zero-based display index.

        Raises:
            IndexError: If index is out of range.
        """
        self._check_index(index)
        self.entries[index].toggle()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.entries):
            msg = f"No entry number {index + 1}"
            raise IndexError(msg)

    def select_all(self) -> None:
        for entry in self.entries:
            entry.selected = True

    def deselect_all(self) -> None:
        for entry in self.entries:
            entry.selected = False

    def set_sort(self, mode: SortMode) -> None:
        """Re-sort the entry list."""
        self.sort_mode = mode
        sort_entries(self.entries, mode)

    @property
    def selected_count(self) -> int:
        return len(selected_entries(self.entries))

    @property
    def selected_size(self) -> int:
        return sum(e.size_bytes for e in selected_entries(self.entries))

    # -- transitions -----------------------------------------------------

    def request_confirmation(self) -> bool:
        """Move to CONFIRMING if anything is selected.

        Returns:
            True if the state changed.
        """
        if self.state != SessionState.SELECTING:
            raise InvalidTransitionError(self.state, "confirm a selection")
        if self.selected_count == 0:
            return False
        self.state = SessionState.CONFIRMING
        return True

    def confirm(self) -> None:
        """Accept the confirmation and start cleaning."""
        if self.state != SessionState.CONFIRMING:
            raise InvalidTransitionError(self.state, "start cleaning")
        self.state = SessionState.CLEANING

    def cancel(self) -> None:
        """Reject the confirmation and go back to selecting."""
        if self.state != SessionState.CONFIRMING:
            raise InvalidTransitionError(self.state, "cancel a confirmation")
        self.state = SessionState.SELECTING

    def quit(self) -> None:
        """Stop the session without cleaning anything further."""
        self.quit_requested = True
        self.state = SessionState.DONE

    def handle_key(self, key: str) -> None:
        """Dispatch one line of user input for the current state.

        Selecting: numbers or ranges (``3``, ``1,4``, ``2-5``) toggle
        entries, ``a``/``d`` select or deselect all, ``t``/``s``/``n`` sort
        by time, size or name, an empty line confirms, ``q`` quits.
        Confirming: ``y`` or an empty line starts cleaning, ``n`` or ``q``
        goes back. Keys not valid in the current state are ignored.

        Raises:
            IndexError: If a number does not match an entry. Nothing is
                toggled then.
        """
        key = key.strip()

        if self.state == SessionState.SELECTING:
            self._handle_selecting_key(key)
        elif self.state == SessionState.CONFIRMING:
            if key in ("y", "Y", "yes", ""):
                self.confirm()
            elif key in ("n", "N", "no", "q"):
                self.cancel()
        elif self.state == SessionState.SCANNING and key == "q":
            self.quit()

    def _handle_selecting_key(self, key: str) -> None:
        if key == "q":
            self.quit()
        elif key == "":
            self.request_confirmation()
        elif key == "a":
            self.select_all()
        elif key == "d":
            self.deselect_all()
        elif key == "t":
            self.set_sort(SortMode.TIME)
        elif key == "s":
            self.set_sort(SortMode.SIZE)
        elif key == "n":
            self.set_sort(SortMode.NAME)
        elif _TOGGLE_PATTERN.match(key):
            indices = _parse_indices(key)
            # All or nothing
            for index in indices:
                self._check_index(index)
            for index in indices:
                self.toggle(index)
        else:
            logger.debug("Ignoring key %r while selecting", key)

    # -- results ---------------------------------------------------------

    @property
    def removed_count(self) -> int:
        """Entries removed, from the last deletion snapshot."""
        return self.deletion_progress.removed if self.deletion_progress else 0

    @property
    def bytes_freed(self) -> int:
        """Bytes freed, from the last deletion snapshot."""
        return self.deletion_progress.bytes_freed if self.deletion_progress else 0


def _parse_indices(text: str) -> list[int]:
    """Turn ``"1,3-4"`` into zero-based indices ``[0, 2, 3]``."""
    indices: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if "-" in part:
            start, end = (int(p) for p in part.split("-"))
            if start > end:
                start, end = end, start
            indices.extend(range(start - 1, end))
        else:
            indices.append(int(part) - 1)
    return indices


def pump_scan(
    session: Session,
    streams: ScanStreams,
    on_update: SessionCallback | None = None,
) -> None:
    """Drain both scan streams into the session until both are closed.

    Keeps exactly one pending receive per open stream and re-arms a
    stream right after handling its item, so neither stream stalls and
    the walker is never more than one item ahead.

    Args:
        session: Session receiving the events.
        streams: Streams returned by scan_for_venvs().
        on_update: Called after every handled item or closure.
    """
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="venvclean-recv")
    entry_stream: Channel[VenvEntry] = streams.entries
    progress_stream: Channel[ScanProgress] = streams.progress
    pending: dict[Future[object], str] = {
        pool.submit(entry_stream.receive): "entry",
        pool.submit(progress_stream.receive): "progress",
    }

    try:
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                kind = pending.pop(future)
                try:
                    item = future.result()
                except ChannelClosed:
                    if kind == "entry":
                        session.on_scan_closed()
                else:
                    if kind == "entry":
                        session.on_entry(item)  # type: ignore[arg-type]
                        pending[pool.submit(entry_stream.receive)] = kind
                    else:
                        session.on_scan_progress(item)  # type: ignore[arg-type]
                        pending[pool.submit(progress_stream.receive)] = kind

                if on_update is not None:
                    on_update(session)
    except BaseException:
        # Wake the receivers and the walker so no thread stays parked
        entry_stream.close()
        progress_stream.close()
        raise
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def pump_deletion(
    session: Session,
    run: DeletionRun,
    on_update: SessionCallback | None = None,
) -> None:
    """Drain a deletion run's progress stream into the session.

    Args:
        session: Session in the CLEANING state.
        run: Running deletion batch.
        on_update: Called after every snapshot and once on closure.
    """
    try:
        for progress in run.progress:
            session.on_deletion_progress(progress)
            if on_update is not None:
                on_update(session)
    except BaseException:
        run.progress.close()
        raise

    session.on_deletion_closed()
    if on_update is not None:
        on_update(session)

"""Background tree walker that streams discovered environments.

Walks a directory tree once, looking for repository marker directories
(``.git``). Each repository found is handed to the detector, and both
discoveries and progress snapshots are published on unbuffered channels
so the walker moves only as fast as its consumer reads.
"""

import logging
import os
import threading
from dataclasses import dataclass

from venvclean.core.channel import Channel, ChannelClosed
from venvclean.core.config import AppConfig
from venvclean.models.entry import VenvEntry
from venvclean.models.progress import ScanProgress
from venvclean.scanner.detector import probe_repository

logger = logging.getLogger(__name__)

_HIDDEN_PREFIX = "."


@dataclass(frozen=True, slots=True)
class ScanStreams:
    """Output of a running scan.

    Attributes:
        entries: Discovered environments, in traversal order.
        progress: Progress snapshots, one per visited directory plus
            one per repository marker and one per discovery.
        thread: Background thread driving the walk.
    """

    entries: Channel[VenvEntry]
    progress: Channel[ScanProgress]
    thread: threading.Thread


class TreeWalker:
    """Depth-first, pre-order walk that publishes entries and progress.

    Hidden directories are skipped, except the repository marker, which
    triggers detection of its parent and is never descended into.
    Unreadable directories are treated as empty.

    Args:
        root: Absolute path of the directory to scan.
        entries: Channel receiving discovered entries.
        progress: Channel receiving progress snapshots.
        config: Directory and file names to look for.
    """

    def __init__(
        self,
        root: str,
        entries: Channel[VenvEntry],
        progress: Channel[ScanProgress],
        config: AppConfig | None = None,
    ) -> None:
        self._root = root
        self._entries = entries
        self._progress = progress
        self._config = config or AppConfig()
        self._folders_scanned = 0
        self._repos_found = 0

    def walk(self) -> None:
        """Run the walk to completion and close both channels.

        Errors are logged and swallowed; the closed channels are the
        only completion signal a consumer gets.
        """
        try:
            self._walk()
        except ChannelClosed:
            logger.debug("Consumer closed a scan stream, stopping walk of %s", self._root)
        except Exception:
            logger.exception("Scan of %s stopped unexpectedly", self._root)
        finally:
            self._entries.close()
            self._progress.close()
            logger.debug(
                "Scan of %s finished: %d folders, %d repositories",
                self._root,
                self._folders_scanned,
                self._repos_found,
            )

    def _walk(self) -> None:
        marker = self._config.marker_dir
        # (path, is_marker); children are pushed in reverse so they pop in name order
        stack: list[tuple[str, bool]] = [(self._root, False)]

        while stack:
            path, is_marker = stack.pop()
            if is_marker:
                self._visit_marker(path)
                continue

            self._folders_scanned += 1
            self._publish_progress(path)

            children: list[tuple[str, bool]] = []
            for name in self._list_subdirs(path):
                if name == marker:
                    children.append((os.path.join(path, name), True))
                elif not name.startswith(_HIDDEN_PREFIX):
                    children.append((os.path.join(path, name), False))
            stack.extend(reversed(children))

    def _visit_marker(self, marker_path: str) -> None:
        """Probe the repository owning a marker directory."""
        repo_path = os.path.dirname(marker_path)
        self._publish_progress(marker_path)

        entry = probe_repository(repo_path, self._config)
        if entry is None:
            return

        self._repos_found += 1
        logger.debug("Found %s (%d bytes)", entry.venv_path, entry.size_bytes)
        self._entries.send(entry)
        self._publish_progress(repo_path)

    def _publish_progress(self, path: str) -> None:
        self._progress.send(
            ScanProgress(
                current_path=path,
                repos_found=self._repos_found,
                folders_scanned=self._folders_scanned,
            )
        )

    @staticmethod
    def _list_subdirs(path: str) -> list[str]:
        """Names of the real (non-symlink) subdirectories of path, sorted."""
        names: list[str] = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            names.append(entry.name)
                    except OSError:
                        continue
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", path, e)
            return []
        return sorted(names)


def scan_for_venvs(root: str, config: AppConfig | None = None) -> ScanStreams:
    """Start scanning a directory tree in a background thread.

    Args:
        root: Absolute path of the directory to scan.
        config: Directory and file names to look for.

    Returns:
        ScanStreams whose channels close when the walk is done.
    """
    entries: Channel[VenvEntry] = Channel("entry stream")
    progress: Channel[ScanProgress] = Channel("progress stream")
    walker = TreeWalker(root, entries, progress, config)

    # Daemon: a consumer that stops reading leaves the walker parked on a send
    thread = threading.Thread(target=walker.walk, name="venvclean-scan", daemon=True)
    thread.start()
    return ScanStreams(entries=entries, progress=progress, thread=thread)

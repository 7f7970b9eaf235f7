"""Recursive size and modification-time probing.

Both probes walk the whole subtree. Entries that vanish or cannot be
stat'ed along the way are skipped; only a failure to list the root
itself is reported to the caller.
"""

import logging
import os
from collections.abc import Iterator
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


def iter_tree(root: str) -> Iterator[os.DirEntry[str]]:
    """Yield every entry below ``root``, depth first, without following symlinks.

    Args:
        root: Directory to traverse. Not yielded itself.

    Yields:
        os.DirEntry for each file, directory and link under root.

    Raises:
        OSError: If root itself cannot be listed.
    """
    with os.scandir(root) as it:
        pending = [list(it)]

    while pending:
        batch = pending.pop()
        for entry in batch:
            yield entry
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if not is_dir:
                continue
            try:
                with os.scandir(entry.path) as it:
                    pending.append(list(it))
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", entry.path, e)


def compute_size(path: str) -> int:
    """Sum the sizes of all regular files under a directory.

    Args:
        path: Directory to measure.

    Returns:
        Total size in bytes. Unreadable files count as zero.

    Raises:
        OSError: If the directory itself cannot be listed.
    """
    total = 0
    for entry in iter_tree(path):
        try:
            if entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
        except OSError:
            continue
    return total


def compute_last_modified(path: str) -> datetime:
    """Find the newest modification time of a directory and anything under it.

    Args:
        path: Directory to inspect.

    Returns:
        Newest mtime (UTC) among the directory itself and every readable
        file and directory below it.

    Raises:
        OSError: If the directory itself cannot be stat'ed or listed.
    """
    newest = os.lstat(path).st_mtime
    for entry in iter_tree(path):
        try:
            mtime = entry.stat(follow_symlinks=False).st_mtime
        except OSError:
            continue
        newest = max(newest, mtime)

    return datetime.fromtimestamp(newest, tz=UTC)

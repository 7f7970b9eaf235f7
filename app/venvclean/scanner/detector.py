"""Repository detection.

Decides whether a repository root holds a virtual environment and, if
so, measures it. Never modifies the filesystem.
"""

import logging
import os
import stat
from datetime import UTC, datetime

from venvclean.core.config import AppConfig
from venvclean.models.entry import VenvEntry
from venvclean.scanner.prober import compute_last_modified, compute_size

logger = logging.getLogger(__name__)


def probe_repository(repo_path: str, config: AppConfig | None = None) -> VenvEntry | None:
    """Build an entry for a repository that contains a virtual environment.

    Args:
        repo_path: Absolute path of the repository root.
        config: Names of the environment directory and manifest file.
            Defaults to ``.venv`` and ``pyproject.toml``.

    Returns:
        VenvEntry if ``<repo_path>/<target_dir>`` is a directory, None
        otherwise (including when it cannot be stat'ed).
    """
    config = config or AppConfig()
    venv_path = os.path.join(repo_path, config.target_dir)

    try:
        venv_stat = os.stat(venv_path)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.debug("Cannot stat %s: %s", venv_path, e)
        return None

    if not stat.S_ISDIR(venv_stat.st_mode):
        return None

    has_pyproject = os.path.exists(os.path.join(repo_path, config.manifest_file))

    try:
        size = compute_size(venv_path)
    except OSError as e:
        logger.debug("Cannot measure %s: %s", venv_path, e)
        size = 0

    try:
        last_modified = compute_last_modified(venv_path)
    except OSError as e:
        logger.debug("Cannot read modification times in %s: %s", venv_path, e)
        last_modified = datetime.fromtimestamp(venv_stat.st_mtime, tz=UTC)

    return VenvEntry(
        repo_path=repo_path,
        venv_path=venv_path,
        has_pyproject=has_pyproject,
        last_modified=last_modified,
        size_bytes=size,
    )

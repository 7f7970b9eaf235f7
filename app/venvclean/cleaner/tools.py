"""Removal tool selection and single-directory removal.

Prefers a trash-aware command (``rip``, ``trash-put``) so deletions can
be undone, then ``rm -rf``, then in-process removal. Windows always uses
in-process removal.
"""

import logging
import os
import shutil
import subprocess
from enum import Enum

from venvclean.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class RemovalTool(str, Enum):
    """Mechanism used to remove a directory.

    Attributes:
        RIP: rm-improved, moves directories to its graveyard.
        TRASH_PUT: trash-cli, moves directories to the desktop trash.
        RM: ``rm -rf``.
        NATIVE: In-process ``shutil.rmtree``.
    """

    RIP = "rip"
    TRASH_PUT = "trash-put"
    RM = "rm"
    NATIVE = "native"


_COMMANDS: dict[RemovalTool, list[str]] = {
    RemovalTool.RIP: ["rip"],
    RemovalTool.TRASH_PUT: ["trash-put"],
    RemovalTool.RM: ["rm", "-rf"],
}

_DETECTION_ORDER: tuple[RemovalTool, ...] = (
    RemovalTool.RIP,
    RemovalTool.TRASH_PUT,
    RemovalTool.RM,
)


class RemovalError(Exception):
    """Raised when a directory could not be removed."""


def detect_removal_tool(preferred: str = "auto") -> RemovalTool:
    """Pick the removal tool to use for a deletion batch.

    Args:
        preferred: "auto" or a RemovalTool value. A preferred tool that
            is not installed falls back to auto-detection.

    Returns:
        The RemovalTool to use.
    """
    if os.name == "nt":
        return RemovalTool.NATIVE

    if preferred != "auto":
        tool = RemovalTool(preferred)
        if tool == RemovalTool.NATIVE or command_exists(_COMMANDS[tool][0]):
            return tool
        logger.warning("Removal tool '%s' not found on PATH, detecting another", preferred)

    for tool in _DETECTION_ORDER:
        if command_exists(_COMMANDS[tool][0]):
            return tool
    return RemovalTool.NATIVE


def remove_directory(path: str, tool: RemovalTool) -> None:
    """Remove a directory tree with the given tool.

    Args:
        path: Absolute path of the directory to remove.
        tool: Mechanism to use.

    Raises:
        RemovalError: If the path does not exist or removal fails.
    """
    # rm -rf succeeds on missing paths; a vanished entry must still count as a failure
    if not os.path.lexists(path):
        raise RemovalError(f"Path does not exist: {path}")

    if tool == RemovalTool.NATIVE:
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise RemovalError(f"Failed to delete {path}: {e}") from e
        return

    args = [*_COMMANDS[tool], path]
    try:
        result = run_command(args)
    except (OSError, subprocess.SubprocessError) as e:
        raise RemovalError(f"Failed to run {tool.value} on {path}: {e}") from e

    if not result.success:
        output = result.stderr.strip() or result.stdout.strip()
        msg = f"Failed to delete {path}: {tool.value} exited with {result.returncode}"
        if output:
            msg = f"{msg} ({output})"
        raise RemovalError(msg)

"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys
from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from venvclean.core.theme import get_theme
from venvclean.models.entry import VenvEntry

_MB = 1024 * 1024
_GB = 1024 * _MB


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format byte count as a human-readable string (1024-based)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in ("KB", "MB", "GB", "TB", "PB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} EB"


def format_age(moment: datetime, now: datetime | None = None) -> str:
    """Describe how long ago a moment was, e.g. "3 weeks ago"."""
    now = now or datetime.now(tz=UTC)
    diff = now - moment
    days = diff.days

    if diff < timedelta(days=1):
        return "today"
    if diff < timedelta(days=2):
        return "yesterday"
    if diff < timedelta(days=7):
        return f"{days} days ago"
    if diff < timedelta(days=30):
        return f"{days // 7} weeks ago"
    if diff < timedelta(days=365):
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"


def size_style(size_bytes: int) -> str:
    """Theme style name for a size, by magnitude."""
    if size_bytes < 50 * _MB:
        return "size_small"
    if size_bytes < 500 * _MB:
        return "size_medium"
    if size_bytes < _GB:
        return "size_large"
    return "size_huge"


def age_style(moment: datetime, now: datetime | None = None) -> str:
    """Theme style name for the age of a modification time."""
    age = (now or datetime.now(tz=UTC)) - moment
    if age < timedelta(days=7):
        return "age_recent"
    if age < timedelta(days=30):
        return "age_old"
    return "age_very_old"


def display_path(path: str, root: str | None) -> str:
    """Show a path relative to the scan root when it lies below it."""
    if root and (path == root or path.startswith(root.rstrip("/") + "/")):
        relative = path[len(root.rstrip("/")) + 1 :]
        return f"./{relative}" if relative else "."
    return path


def create_venv_table(
    entries: list[VenvEntry],
    *,
    title: str = "Virtual Environments",
    root: str | None = None,
) -> Table:
    """Create a numbered table of discovered environments.

    Args:
        entries: Entries to display, in display order.
        title: Table title.
        root: Scan root used to shorten repository paths.

    Returns:
        Rich Table with one row per entry.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("", width=3, justify="center")
    table.add_column("Repository", style="path", overflow="ellipsis")
    table.add_column("pyproject", justify="center")
    table.add_column("Last modified")
    table.add_column("Size", justify="right")

    for index, entry in enumerate(entries, start=1):
        mark = "[selected]✓[/]" if entry.selected else ""
        path = escape(display_path(entry.repo_path, root))
        if entry.selected:
            path = f"[selected]{path}[/]"
        age = f"[{age_style(entry.last_modified)}]{format_age(entry.last_modified)}[/]"
        size = f"[{size_style(entry.size_bytes)}]{format_size(entry.size_bytes)}[/]"
        pyproject = "[success]yes[/]" if entry.has_pyproject else "[muted]-[/]"
        table.add_row(str(index), mark, path, pyproject, age, size)

    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")

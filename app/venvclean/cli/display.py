"""Rich rendering for the interactive cleanup session.

Each function renders one session state; none of them mutate the session.
"""

import json

from rich.console import Group, RenderableType
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.text import Text

from venvclean.core.session import Session
from venvclean.models.entry import VenvEntry, selected_entries
from venvclean.utils.formatting import (
    console,
    create_venv_table,
    display_path,
    format_size,
    size_style,
)

SELECT_HELP = (
    "numbers/ranges: toggle (e.g. 1,3-5) | enter: continue | "
    "t/s/n: sort by time/size/name | a: select all | d: deselect all | q: quit"
)


def render_scan_status(session: Session) -> RenderableType:
    """One-line scan status for a spinner."""
    progress = session.scan_progress
    if progress is None:
        return Text.from_markup(f"Scanning [path]{escape(session.root)}[/]...")

    return Text.from_markup(
        f"Scanning [path]{escape(display_path(progress.current_path, session.root))}[/]  "
        f"folders: [counter]{progress.folders_scanned}[/]  "
        f"found: [success]{progress.repos_found}[/]"
    )


def print_selection(session: Session) -> None:
    """Print the numbered entry list with the selection summary."""
    table = create_venv_table(
        session.entries,
        title=f"Select .venv folders to remove - sorted by {session.sort_mode.label}",
        root=session.root,
    )
    console.print(table)
    console.print(
        f"[header]Selected:[/] [counter]{session.selected_count}[/]/"
        f"[counter]{len(session.entries)}[/] | "
        f"[header]Total size:[/] {format_size(session.selected_size)}"
    )
    console.print(f"[muted]{SELECT_HELP}[/]")


def print_confirmation(session: Session) -> None:
    """Print the list of folders about to be deleted."""
    lines: list[RenderableType] = [
        Text.from_markup("[warning]Confirm deletion[/]"),
        Text.from_markup("[header]You are about to delete the following .venv folders:[/]"),
    ]
    for entry in selected_entries(session.entries):
        size = f"[{size_style(entry.size_bytes)}]{format_size(entry.size_bytes)}[/]"
        lines.append(Text.from_markup(f"  • [path]{escape(entry.repo_path)}[/] ({size})"))
    lines.append(
        Text.from_markup(
            f"\nTotal: [counter]{session.selected_count}[/] folders | "
            f"[warning]{format_size(session.selected_size)}[/]"
        )
    )
    console.print(Group(*lines))


def create_cleaning_progress() -> Progress:
    """Progress bar used while the deletion batch runs."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[header]Cleaning[/]"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("freed [success]{task.fields[freed]}[/]"),
        console=console,
    )


def print_summary(session: Session) -> None:
    """Print the final totals from the last deletion snapshot."""
    if session.removed_count:
        console.print(
            f"[success]Removed {session.removed_count} .venv folder(s), "
            f"freed {format_size(session.bytes_freed)}[/]"
        )
    else:
        console.print("[muted]No folders were removed.[/]")


def print_entries_json(entries: list[VenvEntry]) -> None:
    """Print entries as JSON."""
    data = [
        {
            "repo_path": e.repo_path,
            "venv_path": e.venv_path,
            "has_pyproject": e.has_pyproject,
            "last_modified": e.last_modified.isoformat(),
            "size_bytes": e.size_bytes,
        }
        for e in entries
    ]
    console.print_json(json.dumps(data))

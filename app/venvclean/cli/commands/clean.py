"""Scan-select-clean flow behind the ``venvclean`` command.

Scans a directory tree for git repositories holding a ``.venv``,
lets the user pick which environments to remove, removes them and
reports the reclaimed space.
"""

import logging
import os
from pathlib import Path

import typer
from rich.markup import escape

from venvclean.cleaner.executor import DeletionExecutor
from venvclean.cli.display import (
    create_cleaning_progress,
    print_confirmation,
    print_entries_json,
    print_selection,
    print_summary,
    render_scan_status,
)
from venvclean.cli.types import OutputFormat
from venvclean.core.config import AppConfig, ConfigError, load_config, save_config
from venvclean.core.paths import get_config_path
from venvclean.core.session import Session, SessionState, pump_deletion, pump_scan
from venvclean.models.entry import SortMode
from venvclean.scanner.walker import scan_for_venvs
from venvclean.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


def resolve_root(path: Path) -> str:
    """Resolve the scan root to an absolute path or exit.

    Raises:
        typer.Exit: If the path does not exist or is not a directory.
    """
    root = os.path.abspath(os.path.expanduser(str(path)))
    if not os.path.exists(root):
        print_error(f"Path does not exist: {escape(root)}")
        raise typer.Exit(code=1)
    if not os.path.isdir(root):
        print_error(f"Not a directory: {escape(root)}")
        raise typer.Exit(code=1)
    return root


def require_config(path: Path | None) -> AppConfig:
    """Load configuration or exit with a readable error.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        return load_config(path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e


def write_default_config(path: Path | None) -> None:
    """Write the default configuration file, refusing to overwrite.

    Raises:
        typer.Exit: Always; code 1 if the file exists or cannot be written.
    """
    config_path = path or get_config_path()
    if config_path.exists():
        print_error(f"Config already exists: {escape(str(config_path))}")
        raise typer.Exit(code=1)
    try:
        written = save_config(AppConfig(), config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e
    print_success(f"Wrote default config to {escape(str(written))}")
    raise typer.Exit(code=0)


def scan(root: str, config: AppConfig, sort_mode: SortMode, *, quiet: bool = False) -> Session:
    """Scan root in the background, showing live progress unless quiet."""
    session = Session(root=root, sort_mode=sort_mode)
    streams = scan_for_venvs(root, config)

    if quiet:
        pump_scan(session, streams)
    else:
        with console.status(render_scan_status(session)) as status:
            pump_scan(session, streams, on_update=lambda s: status.update(render_scan_status(s)))

    if session.scan_progress is not None:
        logger.info(
            "Scanned %d folders, found %d repositories with %s",
            session.scan_progress.folders_scanned,
            session.scan_progress.repos_found,
            config.target_dir,
        )
    return session


def select(session: Session) -> None:
    """Prompt until the selection is confirmed or the user quits."""
    while session.state in (SessionState.SELECTING, SessionState.CONFIRMING):
        if session.state == SessionState.SELECTING:
            print_selection(session)
            key = typer.prompt("Select", default="", show_default=False)
            try:
                session.handle_key(key)
            except IndexError as e:
                print_warning(str(e))
                continue
            if key.strip() == "" and session.state == SessionState.SELECTING:
                print_warning("Nothing selected.")
        else:
            print_confirmation(session)
            key = typer.prompt("Are you sure? (y/n)", default="", show_default=False)
            session.handle_key(key)


def clean(session: Session, preferred_tool: str) -> int:
    """Remove the selected entries with a progress bar.

    Returns:
        Number of failed removals.
    """
    run = DeletionExecutor(preferred_tool=preferred_tool).start(session.entries)

    with create_cleaning_progress() as progress:
        task = progress.add_task("clean", total=session.selected_count, freed=format_size(0))

        def _update(s: Session) -> None:
            if s.deletion_progress is not None:
                progress.update(
                    task,
                    completed=s.deletion_progress.current,
                    freed=format_size(s.deletion_progress.bytes_freed),
                )

        pump_deletion(session, run, on_update=_update)

    results = run.results()
    return sum(1 for r in results if not r.success)


def run_clean(
    path: Path,
    *,
    sort_mode: SortMode | None,
    select_all: bool,
    yes: bool,
    output_format: OutputFormat,
    tool: str | None,
    config_path: Path | None,
) -> None:
    """Run the full scan-select-clean flow.

    Raises:
        typer.Exit: With code 1 on fatal errors or when any removal failed.
    """
    config = require_config(config_path)
    root = resolve_root(path)
    session = scan(
        root,
        config,
        sort_mode or SortMode(config.sort),
        quiet=output_format == OutputFormat.JSON,
    )

    if output_format == OutputFormat.JSON:
        print_entries_json(session.entries)
        return

    if session.state == SessionState.DONE:
        print_info(f"No repositories with {config.target_dir} folders found under {escape(root)}.")
        return

    if select_all:
        session.select_all()
    if yes and session.request_confirmation():
        session.confirm()

    select(session)

    if session.state != SessionState.CLEANING:
        print_info("Nothing removed.")
        return

    failures = clean(session, tool or config.removal_tool)
    print_summary(session)

    if failures:
        print_warning(f"{failures} folder(s) could not be removed.")
        raise typer.Exit(code=1)

"""Main CLI application entry point.

Defines the Typer application and its options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from venvclean import __version__
from venvclean.cli.commands.clean import run_clean, write_default_config
from venvclean.cli.types import OutputFormat, ToolChoice
from venvclean.models.entry import SortMode
from venvclean.utils.formatting import err_console

app = typer.Typer(
    name="venvclean",
    help="Find and remove .venv folders inside git repositories.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"venvclean version {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def main(
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan. Defaults to the current directory."),
    ] = Path("."),
    sort_mode: Annotated[
        SortMode | None,
        typer.Option(
            "--sort",
            "-s",
            help="Initial sort order (default from config: time).",
            case_sensitive=False,
        ),
    ] = None,
    select_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Select every environment found."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="table: interactive cleanup; json: print findings and exit.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    tool: Annotated[
        ToolChoice | None,
        typer.Option("--tool", help="Removal tool (default from config: auto)."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Use an alternative config file."),
    ] = None,
    init_config: Annotated[
        bool,
        typer.Option("--init-config", help="Write the default config file and exit."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Scan PATH for git repositories with a .venv folder and remove the ones you pick."""
    _setup_logging(verbose)

    if init_config:
        write_default_config(config_path)

    run_clean(
        path,
        sort_mode=sort_mode,
        select_all=select_all,
        yes=yes,
        output_format=output_format,
        tool=tool.value if tool else None,
        config_path=config_path,
    )


if __name__ == "__main__":
    app()

"""CLI package for venvclean.

This package contains the Typer application and its command flow.
"""

from venvclean.cli.main import app

__all__ = ["app"]

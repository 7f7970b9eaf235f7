"""CLI commands for venvclean.

This package contains the command implementations.
"""

from venvclean.cli.commands import clean

__all__ = ["clean"]

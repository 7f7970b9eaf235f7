"""Utility modules for venvclean.

This module exports commonly used utility functions.
"""

from venvclean.utils.formatting import (
    console,
    create_venv_table,
    err_console,
    format_age,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from venvclean.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_venv_table",
    "err_console",
    "format_age",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]

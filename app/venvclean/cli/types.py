"""Shared option types for the CLI."""

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


class ToolChoice(str, Enum):
    """Removal tool choices accepted by ``--tool``."""

    AUTO = "auto"
    RIP = "rip"
    TRASH_PUT = "trash-put"
    RM = "rm"
    NATIVE = "native"

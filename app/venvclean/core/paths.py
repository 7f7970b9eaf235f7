"""XDG-compliant path management for venvclean.

venvclean keeps no state between runs; the only files it reads are the
optional configuration and theme overrides under the XDG config
directory (``~/.config/venvclean/`` by default).
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "venvclean"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/venvclean/ (or XDG_CONFIG_HOME/venvclean/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/venvclean/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/venvclean/theme.toml.
    """
    return get_config_dir() / "theme.toml"

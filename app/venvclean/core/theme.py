"""Theme management for venvclean CLI.

Provides color theming via TOML configuration files with user override support.
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from venvclean.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Color configuration for venvclean CLI.

    All colors must be valid hex codes (#RRGGBB or #RGB).
    """

    model_config = ConfigDict(extra="forbid")

    # Base colors
    text: str = "#ffffff"
    muted: str = "#8a8a8a"
    header: str = "#ff87ff"
    border: str = "#875fff"
    path: str = "#87d7ff"
    counter: str = "#00ffff"

    # Semantic colors
    success: str = "#00ff00"
    warning: str = "#ff8700"
    error: str = "#ff0000"
    info: str = "#00ffff"

    selected: str = "#ffafff"

    # Size magnitude
    size_small: str = "#00ff00"
    size_medium: str = "#ffff00"
    size_large: str = "#ff8700"
    size_huge: str = "#ff0000"

    # Age of the newest file in an environment
    age_recent: str = "#00ff00"
    age_old: str = "#ffff00"
    age_very_old: str = "#ff0000"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Validate that all color values are valid hex codes."""
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        color_part = color[1:]
        if len(color_part) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(color_part, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_bundled_theme_path() -> Path:
    """Get the bundled default theme path."""
    return resources.files("venvclean.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Load colors section from a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Dictionary of color name to hex value, or None if loading failed.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse TOML file %s: %s", path, e)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load theme colors with user override support.

    Priority:
    1. User theme (~/.config/venvclean/theme.toml) - partial or full override
    2. Bundled default theme (data/theme.toml)

    Args:
        user_path: Override location of the user theme file.

    Returns:
        ThemeColors instance with merged configuration.
    """
    bundled_colors = _load_toml_colors(Path(get_bundled_theme_path()))
    if bundled_colors is None:
        logger.error("Failed to load bundled theme - installation may be corrupted")
        bundled_colors = {}

    user_colors = _load_toml_colors(user_path or get_user_theme_path())
    merged_colors = {**bundled_colors, **(user_colors or {})}

    try:
        return ThemeColors(**merged_colors)
    except ValueError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Convert ThemeColors to a Rich Theme.

    Args:
        colors: ThemeColors instance to convert. If None, loads theme automatically.

    Returns:
        Rich Theme instance configured with the color scheme.
    """
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = {
        "text": colors.text,
        "muted": colors.muted,
        "header": f"bold {colors.header}",
        "border": colors.border,
        "path": colors.path,
        "counter": f"bold {colors.counter}",
        "success": f"bold {colors.success}",
        "warning": f"bold {colors.warning}",
        "error": f"bold {colors.error}",
        "info": colors.info,
        "selected": f"bold {colors.selected}",
        "size_small": f"bold {colors.size_small}",
        "size_medium": f"bold {colors.size_medium}",
        "size_large": f"bold {colors.size_large}",
        "size_huge": f"bold {colors.size_huge}",
        "age_recent": colors.age_recent,
        "age_old": colors.age_old,
        "age_very_old": colors.age_very_old,
        # Convenience styles
        "bold_header": f"bold {colors.header}",
        "dim": colors.muted,
    }

    return Theme(styles)


# Module-level cached theme instance
_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, loading and caching it if necessary."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme

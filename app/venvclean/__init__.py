"""venvclean - find and remove Python virtual environments inside git repositories."""

__version__ = "0.1.0"

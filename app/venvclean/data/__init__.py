"""Bundled data files for venvclean."""

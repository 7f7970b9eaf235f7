"""Filesystem scanning for virtual environments inside git repositories.

This module provides the size/metadata prober, the repository detector
and the background tree walker that streams results to a consumer.
"""

from venvclean.scanner.detector import probe_repository
from venvclean.scanner.prober import compute_last_modified, compute_size, iter_tree
from venvclean.scanner.walker import ScanStreams, TreeWalker, scan_for_venvs

__all__ = [
    "ScanStreams",
    "TreeWalker",
    "compute_last_modified",
    "compute_size",
    "iter_tree",
    "probe_repository",
    "scan_for_venvs",
]

"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import threading
from collections.abc import Callable
from pathlib import Path

import pytest
from venvclean.core.config import AppConfig
from venvclean.models.entry import VenvEntry
from venvclean.models.progress import ScanProgress
from venvclean.scanner.walker import scan_for_venvs

RepoFactory = Callable[..., Path]
ScanRunner = Callable[..., tuple[list[VenvEntry], list[ScanProgress]]]
ToolInstaller = Callable[[str, str], Path]


@pytest.fixture(autouse=True)
def isolated_config_home(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point XDG_CONFIG_HOME outside both the real home and tmp_path."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def make_repo(tmp_path: Path) -> RepoFactory:
    """Factory creating a git repository below tmp_path.

    The returned callable takes the repository path relative to tmp_path,
    ``venv_files`` (file path inside .venv mapped to its size in bytes, or
    None for no .venv at all) and ``pyproject`` (create pyproject.toml).
    """

    def _make(
        relative: str,
        venv_files: dict[str, int] | None = None,
        pyproject: bool = False,
    ) -> Path:
        repo = tmp_path / relative
        (repo / ".git" / "objects").mkdir(parents=True)
        (repo / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        if venv_files is not None:
            venv = repo / ".venv"
            venv.mkdir()
            for name, size in venv_files.items():
                target = venv / name
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(b"x" * size)
        if pyproject:
            (repo / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        return repo

    return _make


@pytest.fixture
def run_scan() -> ScanRunner:
    """Run a scan to completion and return (entries, progress snapshots)."""

    def _run(
        root: Path, config: AppConfig | None = None
    ) -> tuple[list[VenvEntry], list[ScanProgress]]:
        streams = scan_for_venvs(str(root), config)
        snapshots: list[ScanProgress] = []
        drainer = threading.Thread(target=lambda: snapshots.extend(streams.progress))
        drainer.start()

        entries = list(streams.entries)

        drainer.join(timeout=10)
        streams.thread.join(timeout=10)
        return entries, snapshots

    return _run


@pytest.fixture
def fake_tool(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> ToolInstaller:
    """Factory installing a shell script as a command at the front of PATH.

    The returned callable takes the command name and the script body.
    """
    bin_dir = tmp_path_factory.mktemp("bin")
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _install(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(0o755)
        return script

    return _install

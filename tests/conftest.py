"""Pytest configuration and shared fixtures."""

import logging
import os
import sys
from pathlib import Path

import pytest

from shelfsteam.config import ProbeConfig, ShelfSteamConfig, reset_config


IS_WINDOWS = sys.platform == "win32"
skip_on_windows = pytest.mark.skipif(IS_WINDOWS, reason="Needs POSIX process semantics")


def make_script(path: Path, body: str, executable: bool = True) -> Path:
    """Write a /bin/sh script and optionally mark it executable."""
    path.write_text("#!/bin/sh\n" + body)
    mode = 0o755 if executable else 0o644
    path.chmod(mode)
    return path


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep user config, env overrides and log handlers out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for name in list(os.environ):
        if name.startswith("SHELF_STEAM_"):
            monkeypatch.delenv(name)
    reset_config()

    yield home

    reset_config()
    package_logger = logging.getLogger("shelfsteam")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config():
    """Default configuration, independent of any file on disk."""
    return ShelfSteamConfig()


@pytest.fixture
def probe_config():
    return ProbeConfig()


@pytest.fixture
def repository(tmp_path):
    """A game repository with a mix of describable and undescribable entries."""
    repo = tmp_path / "games"
    repo.mkdir()

    make_script(repo / "hello", 'echo Hello\necho World\n')
    make_script(repo / "quiet", "exit 0\n")
    make_script(repo / "notes.txt", "echo should never run\n", executable=False)
    (repo / "levels").mkdir()

    return repo


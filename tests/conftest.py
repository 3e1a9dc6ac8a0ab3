"""Shared fixtures for shellcall tests."""

import os
import stat

import pytest

from shellcall.core.config import settings
from shellcall.core.logger import set_logger


@pytest.fixture(autouse=True)
def restore_runtime_settings():
    """Keep process-wide settings and the shared logger isolated per test."""
    original = settings.config
    yield
    settings.apply(original)
    set_logger(None)


@pytest.fixture
def quiet():
    """Disable echo so captured test output only shows what a test prints."""
    settings.update(echo=False, verbose=False)


@pytest.fixture
def fake_bin(tmp_path, monkeypatch):
    """A directory prepended to PATH holding stand-in executables."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return bin_dir


@pytest.fixture
def fake_git(fake_bin):
    """A ``git`` on PATH that prints its arguments, one per line."""
    git = fake_bin / "git"
    git.write_text('#!/bin/sh\nfor arg in "$@"; do echo "$arg"; done\n')
    git.chmod(git.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return git

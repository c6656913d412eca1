"""Shared test fixtures for TrackMyExts tests.

::

    temp_dir (base temporary directory)
    ├── temp_home (isolated HOME)
    └── temp_project (isolated project directory)
        └── git_repo (initialized git repository with one commit)

    extension_manager (AsyncMock implementing IExtensionManager)
    ui (MagicMock implementing IUserInterface)
"""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from trackmyexts.core.interfaces import IExtensionManager, IUserInterface


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory."""
    home = temp_dir / "home"
    home.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def temp_project(temp_dir: Path) -> Path:
    """Create a temporary project directory."""
    project = temp_dir / "project"
    project.mkdir(parents=True)
    return project


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def git_repo(temp_project: Path) -> Path:
    """Initialize a git repository with an initial commit (README.md)."""
    _git(temp_project, "init")
    _git(temp_project, "config", "user.email", "test@test.com")
    _git(temp_project, "config", "user.name", "Test User")
    _git(temp_project, "config", "commit.gpgsign", "false")

    readme = temp_project / "README.md"
    readme.write_text("# Extension history\n")
    _git(temp_project, "add", ".")
    _git(temp_project, "commit", "-m", "Initial commit")

    return temp_project


@pytest.fixture
def empty_git_repo(temp_project: Path) -> Path:
    """Initialize a git repository without any commits."""
    _git(temp_project, "init")
    return temp_project


@pytest.fixture
def extension_manager() -> AsyncMock:
    """Extension manager double with an empty installed list."""
    manager = AsyncMock(spec=IExtensionManager)
    manager.list_installed.return_value = []
    return manager


@pytest.fixture
def ui() -> MagicMock:
    """User interface double that confirms everything."""
    mock = MagicMock(spec=IUserInterface)
    mock.confirm_restore.return_value = True
    return mock

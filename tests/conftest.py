from __future__ import annotations

from pathlib import Path

import pytest

from repocontext.repositories import RepositoryRegistry
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture(autouse=True)
def _restore_working_directory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Registries change the process directory; put it back after every test."""
    monkeypatch.chdir(Path.cwd())


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def registry(tmp_path: Path) -> RepositoryRegistry:
    """A registry whose canonical root is the test's tmp_path."""
    return RepositoryRegistry(root_dir=tmp_path)

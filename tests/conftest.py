"""
Test configuration and fixtures shared by unit and integration tests.

Provides an isolated process environment, throwaway git repositories and
ready-made action inputs.
"""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pygit2
import pytest

from path_delta.config.models import ActionInputs

BASE_SHA = "c6023e778dac2c67e7ec0c42889e349a76414294"
HEAD_SHA = "839bc7c55038951cfd3fed884617fd80d02ddbd5"


@pytest.fixture(autouse=True)
def clean_action_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Why: Tests often run inside GitHub Actions, where GITHUB_* variables are set
    What: Removes every INPUT_* and GITHUB_* variable for the duration of a test
    How: Uses monkeypatch so the original environment is restored afterwards
    """
    for name in list(os.environ):
        if name.startswith(("INPUT_", "GITHUB_")):
            monkeypatch.delenv(name, raising=False)


class GitRepoBuilder:
    """Builds commits in a real repository under a temporary directory."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = pygit2.init_repository(str(path))
        self.signature = pygit2.Signature("Test User", "test@example.com")

    def commit(self, files: dict[str, str | None], message: str = "commit") -> str:
        """Write (or delete, for None) files and commit them on HEAD."""
        index = self.repo.index
        for rel_path, content in files.items():
            target = self.path / rel_path
            if content is None:
                target.unlink()
                index.remove(rel_path)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content)
                index.add(rel_path)
        index.write()
        tree = index.write_tree()

        parents = [] if self.repo.head_is_unborn else [self.repo.head.target]
        oid = self.repo.create_commit(
            "HEAD", self.signature, self.signature, message, tree, parents
        )
        return str(oid)

    def branch(self, name: str, sha: str) -> None:
        self.repo.branches.local.create(name, self.repo[sha])


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """Empty repository ready for commits."""
    return GitRepoBuilder(tmp_path / "repo")


@pytest.fixture
def make_inputs() -> Callable[..., ActionInputs]:
    """Factory for ActionInputs with sensible online defaults."""

    def _make(**overrides: Any) -> ActionInputs:
        values: dict[str, Any] = {
            "repository": "owner/repo",
            "sha": HEAD_SHA,
            "github_token": "test-token",
            "branch": "main",
        }
        values.update(overrides)
        return ActionInputs.model_validate(values)

    return _make

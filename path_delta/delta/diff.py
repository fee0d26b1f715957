"""Changed-path computation between two revisions.

Two interchangeable providers share one contract: ``diff(base, current)``
returns the changed paths in backend order, without deduplication, or
raises ``DiffError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import pygit2
from pygit2.enums import RepositoryOpenFlag

from path_delta.github.client import GitHubClient
from path_delta.github.exceptions import GitHubError

from .exceptions import DiffError
from .models import RepositoryCoordinates

logger = logging.getLogger(__name__)


class DiffProvider(ABC):
    """Computes the paths that differ between two revisions."""

    @abstractmethod
    async def diff(self, base: str, current: str) -> list[str]:
        """Return the changed paths between ``base`` and ``current``.

        Raises:
            DiffError: If a revision cannot be resolved or the backend fails
        """
        ...


def open_repository(repo_path: str | Path) -> pygit2.Repository:
    """Open the git repository at exactly ``repo_path``.

    Parent directories are not searched, so a plain directory inside some
    other clone is not a repository.

    Raises:
        pygit2.GitError: If no repository exists at the path
    """
    return pygit2.Repository(
        str(repo_path), flags=RepositoryOpenFlag.NO_SEARCH
    )


def resolve_commit(repo: pygit2.Repository, sha: str) -> pygit2.Commit | None:
    """Resolve a commit hash to its commit object, or None if unknown."""
    if not sha:
        return None
    try:
        obj = repo[sha]
        return obj.peel(pygit2.Commit)
    except (KeyError, ValueError, pygit2.GitError):
        return None


class LocalDiffProvider(DiffProvider):
    """Tree-level diff of two commits in an on-disk repository.

    Each change contributes its post-change path. A pure deletion has no
    post-change path and contributes an empty string, which the path filter
    always drops.
    """

    def __init__(self, repo_path: str | Path):
        """Initialize with the path of the repository to inspect.

        Args:
            repo_path: Directory containing the repository (working tree or bare)
        """
        self.repo_path = Path(repo_path)

    async def diff(self, base: str, current: str) -> list[str]:
        try:
            repo = open_repository(self.repo_path)
        except pygit2.GitError as e:
            raise DiffError(
                f"Could not open repository at {self.repo_path}: {e}",
                base=base,
                current=current,
            ) from e

        base_commit = resolve_commit(repo, base)
        if base_commit is None:
            raise DiffError(
                f"Could not find commit for SHA '{base}'", base=base, current=current
            )
        current_commit = resolve_commit(repo, current)
        if current_commit is None:
            raise DiffError(
                f"Could not find commit for SHA '{current}'", base=base, current=current
            )

        try:
            changes = repo.diff(base_commit.tree, current_commit.tree)
        except pygit2.GitError as e:
            raise DiffError(
                f"Could not diff trees of {base} and {current}: {e}",
                base=base,
                current=current,
            ) from e

        paths = []
        for delta in changes.deltas:
            if delta.status == pygit2.GIT_DELTA_DELETED:
                paths.append("")
            else:
                paths.append(delta.new_file.path)

        logger.info(f"Local diff {base}..{current}: {len(paths)} changed paths")
        return paths


class RemoteDiffProvider(DiffProvider):
    """Changed paths reported by the GitHub compare API."""

    def __init__(self, client: GitHubClient, coordinates: RepositoryCoordinates):
        """Initialize with dependencies.

        Args:
            client: Authenticated GitHub client (injected)
            coordinates: Repository to compare in
        """
        self.client = client
        self.coordinates = coordinates

    async def diff(self, base: str, current: str) -> list[str]:
        try:
            comparison = await self.client.compare_commits(
                self.coordinates.owner, self.coordinates.name, base, current
            )
        except GitHubError as e:
            raise DiffError(
                f"Failed to compare {base}...{current} in {self.coordinates}: {e}",
                base=base,
                current=current,
                details={"status_code": e.status_code},
            ) from e

        files = comparison.get("files") or []
        paths = [entry.get("filename", "") for entry in files]

        logger.info(f"Remote diff {base}...{current}: {len(paths)} changed paths")
        return paths

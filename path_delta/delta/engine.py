"""Delta resolution orchestration.

Resolves the base revision, computes the changed paths with the selected
provider and filters them. Strategy selection happens once, in
``create_engine``; the engine itself only sees the two interfaces.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from path_delta.github.client import GitHubClient

from .diff import DiffProvider, LocalDiffProvider, RemoteDiffProvider
from .models import DeltaResult, DiffMode
from .patterns import PathFilter
from .revisions import BranchRevisionStrategy, DeploymentRevisionStrategy, RevisionStrategy

if TYPE_CHECKING:
    from path_delta.config.models import ActionInputs

logger = logging.getLogger(__name__)


class DeltaEngine:
    """Runs revision resolution, diff computation and filtering in sequence."""

    def __init__(self, revision_strategy: RevisionStrategy, diff_provider: DiffProvider):
        self.revision_strategy = revision_strategy
        self.diff_provider = diff_provider

    async def run(self, inputs: ActionInputs) -> DeltaResult:
        """Compute the filtered delta for already validated inputs.

        Raises:
            RevisionError: If the base revision lookup fails without fallback
            DiffError: If the changed paths cannot be computed
        """
        base = await self.revision_strategy.resolve_base()
        current = inputs.current_revision
        if not base:
            logger.warning(f"No base revision found, comparing against '' and {current}")

        changed = await self.diff_provider.diff(base, current)

        path_filter = PathFilter(inputs.include_patterns, inputs.exclude_patterns)
        files = path_filter.apply(changed)
        if path_filter.invalid_patterns:
            logger.warning(f"Skipped {len(path_filter.invalid_patterns)} invalid patterns")

        logger.info(
            f"Delta {base}..{current}: {len(changed)} changed, {len(files)} after filtering"
        )
        return DeltaResult(files=files)


def create_revision_strategy(
    inputs: ActionInputs,
    client: GitHubClient | None = None,
    repo_path: str | Path = ".",
) -> RevisionStrategy:
    """Select deployment-based or branch-based base resolution."""
    if inputs.environment:
        if client is None:
            raise ValueError("A GitHub client is required to resolve deployments")
        return DeploymentRevisionStrategy(client, inputs.coordinates, inputs.environment)

    if inputs.mode == DiffMode.REMOTE:
        return BranchRevisionStrategy(
            inputs.branch, DiffMode.REMOTE, client=client, coordinates=inputs.coordinates
        )
    return BranchRevisionStrategy(inputs.branch, DiffMode.LOCAL, repo_path=repo_path)


def create_diff_provider(
    inputs: ActionInputs,
    client: GitHubClient | None = None,
    repo_path: str | Path = ".",
) -> DiffProvider:
    """Select the remote compare API or the local repository."""
    if inputs.mode == DiffMode.REMOTE:
        if client is None:
            raise ValueError("A GitHub client is required for remote diffs")
        return RemoteDiffProvider(client, inputs.coordinates)
    return LocalDiffProvider(repo_path)


def create_engine(
    inputs: ActionInputs,
    client: GitHubClient | None = None,
    repo_path: str | Path = ".",
) -> DeltaEngine:
    """Build an engine with the strategies selected by ``inputs``.

    Args:
        inputs: Validated action inputs
        client: GitHub client, needed in remote mode or when an environment is set
        repo_path: Local repository directory, used in local mode

    Raises:
        ValueError: If a remote strategy is selected but no client is given
    """
    return DeltaEngine(
        create_revision_strategy(inputs, client, repo_path),
        create_diff_provider(inputs, client, repo_path),
    )

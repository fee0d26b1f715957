"""Base revision resolution.

The base revision is either the SHA of the latest successful deployment to
an environment, or the tip of a branch. An empty string means "no base
found" and is returned rather than raised wherever the lookup has a
recoverable absence.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import pygit2

from path_delta.github.client import GitHubClient
from path_delta.github.exceptions import GitHubError

from .diff import open_repository
from .exceptions import RevisionError
from .models import DeploymentRecord, DiffMode, RepositoryCoordinates

logger = logging.getLogger(__name__)

DEPLOYMENTS_PER_PAGE = 50


class RevisionStrategy(ABC):
    """Determines the revision that changes are measured against."""

    @abstractmethod
    async def resolve_base(self) -> str:
        """Return the base revision, or an empty string if none was found.

        Raises:
            RevisionError: If the lookup fails in a way that has no fallback
        """
        ...


class DeploymentRevisionStrategy(RevisionStrategy):
    """SHA of the newest deployment whose latest status is ``success``.

    Deployments are scanned newest first, page by page, and the scan stops
    at the first success. A deployment whose statuses are missing or cannot
    be listed is skipped and recorded in ``skipped_deployments``.
    """

    def __init__(
        self,
        client: GitHubClient,
        coordinates: RepositoryCoordinates,
        environment: str,
        per_page: int = DEPLOYMENTS_PER_PAGE,
    ):
        """Initialize with dependencies.

        Args:
            client: Authenticated GitHub client (injected)
            coordinates: Repository whose deployments are listed
            environment: Deployment environment name
            per_page: Deployments fetched per page
        """
        self.client = client
        self.coordinates = coordinates
        self.environment = environment
        self.per_page = per_page

        self.skipped_deployments: list[int] = []
        self.pages_visited = 0

    async def _latest_statuses(self, deployment: DeploymentRecord) -> DeploymentRecord:
        statuses = await self.client.list_deployment_statuses(
            self.coordinates.owner,
            self.coordinates.name,
            deployment.id,
            per_page=1,
        )
        return deployment.with_statuses(statuses)

    async def resolve_base(self) -> str:
        paginator = self.client.list_deployments(
            self.coordinates.owner,
            self.coordinates.name,
            environment=self.environment,
            per_page=self.per_page,
        )

        try:
            async for page in paginator.pages():
                self.pages_visited += 1
                for item in page.items:
                    deployment = DeploymentRecord.from_dict(item)

                    try:
                        deployment = await self._latest_statuses(deployment)
                    except GitHubError as e:
                        logger.warning(
                            f"Error getting status of deployment {deployment.id}: {e}"
                        )
                        self.skipped_deployments.append(deployment.id)
                        continue

                    if deployment.latest_status is None:
                        logger.warning(
                            f"No deployment status found for deployment ID {deployment.id}"
                        )
                        self.skipped_deployments.append(deployment.id)
                        continue

                    if deployment.is_successful:
                        logger.info(
                            f"Latest successful deployment for {self.environment}: "
                            f"ID {deployment.id}, SHA {deployment.sha}"
                        )
                        return deployment.sha
        except GitHubError as e:
            raise RevisionError(
                f"Error listing deployments for environment '{self.environment}' "
                f"in {self.coordinates}: {e}",
                details={"environment": self.environment, "status_code": e.status_code},
            ) from e

        logger.warning(
            f"No successful deployments found for environment: {self.environment} "
            f"({self.pages_visited} pages scanned)"
        )
        return ""


class BranchRevisionStrategy(RevisionStrategy):
    """Tip commit of a branch, looked up remotely or in a local repository.

    A remote lookup failure is logged and yields an empty string. A local
    lookup has no fallback, so its failures raise ``RevisionError``.
    """

    def __init__(
        self,
        branch: str,
        mode: DiffMode,
        client: GitHubClient | None = None,
        coordinates: RepositoryCoordinates | None = None,
        repo_path: str | Path | None = None,
    ):
        """Initialize for one lookup mode.

        Args:
            branch: Branch name, without the ``refs/heads/`` prefix
            mode: REMOTE uses the GitHub refs API, LOCAL the on-disk repository
            client: Authenticated GitHub client, required for REMOTE
            coordinates: Repository coordinates, required for REMOTE
            repo_path: Repository directory, required for LOCAL

        Raises:
            ValueError: If a dependency required by the mode is missing
        """
        if mode == DiffMode.REMOTE and (client is None or coordinates is None):
            raise ValueError("client and coordinates are required for REMOTE mode")
        if mode == DiffMode.LOCAL and repo_path is None:
            raise ValueError("repo_path is required for LOCAL mode")

        self.branch = branch
        self.mode = mode
        self.client = client
        self.coordinates = coordinates
        self.repo_path = repo_path

    @property
    def ref_name(self) -> str:
        return f"refs/heads/{self.branch}"

    async def resolve_base(self) -> str:
        if self.mode == DiffMode.REMOTE:
            if self.client is None or self.coordinates is None:
                raise RevisionError("Remote branch lookup needs a client and coordinates")
            return await self._resolve_remote(self.client, self.coordinates)

        if self.repo_path is None:
            raise RevisionError("Local branch lookup needs a repository path")
        return self._resolve_local(self.repo_path)

    async def _resolve_remote(
        self, client: GitHubClient, coordinates: RepositoryCoordinates
    ) -> str:
        try:
            ref = await client.get_ref(coordinates.owner, coordinates.name, self.ref_name)
        except GitHubError as e:
            logger.warning(
                f"Error retrieving SHA for branch '{self.branch}' "
                f"in repository '{coordinates}': {e}"
            )
            return ""

        sha = (ref.get("object") or {}).get("sha") or ""
        logger.info(f"Latest SHA for branch {self.branch}: {sha}")
        return sha

    def _resolve_local(self, repo_path: str | Path) -> str:
        try:
            repo = open_repository(repo_path)
        except pygit2.GitError as e:
            raise RevisionError(
                f"Could not open repository at {repo_path}: {e}"
            ) from e

        try:
            reference = repo.references.get(self.ref_name)
        except (ValueError, pygit2.GitError):
            reference = None
        if reference is None:
            raise RevisionError(
                f"Could not find reference for branch {self.branch}",
                details={"ref": self.ref_name},
            )

        try:
            commit = repo[reference.resolve().target].peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise RevisionError(
                f"Could not get commit object for branch {self.branch}: {e}",
                details={"ref": self.ref_name},
            ) from e

        sha = str(commit.id)
        logger.info(f"Latest SHA for local branch {self.branch}: {sha}")
        return sha

"""GitHub API client with token authentication and pagination.

Every request is attempted exactly once. A non-2xx response is mapped to a
typed ``GitHubError`` subclass and raised to the caller, which decides
whether the failure is fatal.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urljoin

import aiohttp

from .auth import AuthProvider
from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
    GitHubValidationError,
)
from .pagination import AsyncPaginator, PaginatedResponse

logger = logging.getLogger(__name__)


@dataclass
class GitHubClientConfig:
    """Configuration for GitHub client."""

    base_url: str = "https://api.github.com"
    timeout: int = 30
    user_agent: str = "path-delta/1.0"


class GitHubClient:
    """Async GitHub REST API client."""

    def __init__(
        self,
        auth: AuthProvider,
        config: GitHubClientConfig | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            auth: Authentication provider
            config: Client configuration
        """
        self.auth = auth
        self.config = config or GitHubClientConfig()

        # HTTP session will be initialized on first use
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure HTTP session is initialized."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/vnd.github+json",
                },
            )

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _generate_correlation_id(self) -> str:
        """Generate correlation ID for request tracking."""
        return str(uuid.uuid4())[:8]

    def _url(self, path: str) -> str:
        # Keep any path prefix of the base URL (GitHub Enterprise: /api/v3)
        return urljoin(self.config.base_url.rstrip("/") + "/", path.lstrip("/"))

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[Any, dict[str, str]]:
        """Make a single HTTP request and decode its JSON body.

        Args:
            method: HTTP method
            url: Request URL
            params: Query parameters

        Returns:
            Tuple of (decoded JSON body or None, response headers)

        Raises:
            GitHubError: Various GitHub API errors
        """
        correlation_id = self._generate_correlation_id()

        auth_token = await self.auth.get_token()
        await self._ensure_session()

        if not self._session:
            raise GitHubConnectionError("Failed to initialize HTTP session")

        logger.debug(f"GitHub API request [{correlation_id}] {method} {url}")

        try:
            async with self._session.request(
                method, url, params=params, headers=auth_token.to_header()
            ) as response:
                logger.debug(
                    f"GitHub API response [{correlation_id}] {response.status}"
                )

                if not 200 <= response.status < 300:
                    await self._handle_error_response(response, correlation_id)

                if response.status == 204:
                    return None, dict(response.headers)

                data = await response.json(content_type=None)
                return data, dict(response.headers)

        except asyncio.TimeoutError as e:
            raise GitHubTimeoutError(f"Request timeout for {method} {url}") from e
        except aiohttp.ClientError as e:
            raise GitHubConnectionError(
                f"Connection error for {method} {url}: {e}"
            ) from e

    async def _handle_error_response(
        self, response: aiohttp.ClientResponse, correlation_id: str
    ) -> None:
        """Handle error responses from GitHub API.

        Args:
            response: HTTP response
            correlation_id: Request correlation ID

        Raises:
            GitHubError: Appropriate error based on status code
        """
        try:
            error_data = await response.json(content_type=None)
        except (json.JSONDecodeError, aiohttp.ContentTypeError):
            error_data = None
        if not isinstance(error_data, dict):
            error_data = {"message": await response.text()}

        error_message = error_data.get("message") or f"HTTP {response.status}"

        logger.warning(
            f"GitHub API error [{correlation_id}] {response.status}: {error_message}"
        )

        if response.status == 401:
            raise GitHubAuthenticationError(error_message, response.status)
        elif response.status == 403:
            if "rate limit" in error_message.lower():
                reset_time = response.headers.get("X-RateLimit-Reset")
                raise GitHubRateLimitError(
                    error_message,
                    reset_time=int(reset_time) if reset_time else None,
                )
            raise GitHubAuthenticationError(error_message, response.status)
        elif response.status == 404:
            raise GitHubNotFoundError(error_message, response.status)
        elif response.status == 422:
            raise GitHubValidationError(error_message, response.status)
        elif 500 <= response.status < 600:
            raise GitHubServerError(error_message, response.status)
        else:
            raise GitHubError(error_message, response.status)

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make GET request to GitHub API.

        Args:
            path: API path (e.g., '/repos/owner/repo/deployments')
            params: Query parameters

        Returns:
            JSON response data
        """
        data, _ = await self._make_request("GET", self._url(path), params)
        return data

    async def _fetch_page(
        self, url: str, params: dict[str, Any] | None = None
    ) -> PaginatedResponse:
        """Fetch one page of a listing (used by AsyncPaginator).

        Args:
            url: URL to fetch
            params: Query parameters

        Returns:
            PaginatedResponse with data and headers
        """
        data, headers = await self._make_request("GET", url, params)
        if not isinstance(data, list):
            raise GitHubError(f"Expected a JSON array from {url}")
        return PaginatedResponse(data, headers, url)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
    ) -> AsyncPaginator:
        """Create async paginator for GitHub API endpoint.

        Args:
            path: API path
            params: Query parameters
            per_page: Items per page (max 100)

        Returns:
            AsyncPaginator for iterating through results
        """
        return AsyncPaginator(
            client=self,
            initial_url=self._url(path),
            params=params,
            per_page=per_page,
        )

    # Convenience methods for the endpoints used by delta resolution

    def list_deployments(
        self,
        owner: str,
        repo: str,
        environment: str | None = None,
        per_page: int = 50,
    ) -> AsyncPaginator:
        """List deployments for a repository, newest first.

        Args:
            owner: Repository owner
            repo: Repository name
            environment: Only return deployments to this environment
            per_page: Items per page

        Returns:
            AsyncPaginator for deployments
        """
        params = {"environment": environment} if environment else None
        return self.paginate(
            f"/repos/{owner}/{repo}/deployments", params=params, per_page=per_page
        )

    async def list_deployment_statuses(
        self,
        owner: str,
        repo: str,
        deployment_id: int,
        per_page: int = 1,
    ) -> list[dict[str, Any]]:
        """List the most recent statuses of a deployment (first page only).

        Args:
            owner: Repository owner
            repo: Repository name
            deployment_id: Deployment identifier
            per_page: Number of statuses to return

        Returns:
            Deployment statuses, newest first
        """
        data = await self.get(
            f"/repos/{owner}/{repo}/deployments/{deployment_id}/statuses",
            params={"per_page": per_page},
        )
        return data or []

    async def get_ref(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        """Get a single git reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Fully qualified ref ("refs/heads/main") or short form ("heads/main")

        Returns:
            Reference data including the referenced object
        """
        ref = ref.removeprefix("refs/")
        return await self.get(f"/repos/{owner}/{repo}/git/ref/{quote(ref)}")

    async def compare_commits(
        self, owner: str, repo: str, base: str, head: str
    ) -> dict[str, Any]:
        """Compare two commits.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Base commit SHA or ref
            head: Head commit SHA or ref

        Returns:
            Comparison data including the changed ``files``
        """
        return await self.get(f"/repos/{owner}/{repo}/compare/{base}...{head}")

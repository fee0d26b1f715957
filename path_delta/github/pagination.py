"""GitHub API pagination utilities."""

import re
from collections.abc import AsyncIterator
from typing import Any


class LinkHeader:
    """Parser for GitHub Link headers."""

    _LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')

    def __init__(self, link_header: str | None = None):
        """Initialize Link header parser.

        Args:
            link_header: Raw Link header value from response
        """
        self.links: dict[str, str] = {}
        if link_header:
            self._parse(link_header)

    def _parse(self, link_header: str) -> None:
        # Link header format: <url>; rel="next", <url>; rel="last"
        for match in self._LINK_PATTERN.finditer(link_header):
            url, rel = match.groups()
            self.links[rel] = url

    @property
    def next_url(self) -> str | None:
        """Get URL for next page."""
        return self.links.get("next")

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return "next" in self.links


class PaginatedResponse:
    """Wrapper for paginated GitHub API responses."""

    def __init__(
        self,
        data: list[dict[str, Any]],
        headers: dict[str, str],
        url: str,
    ):
        """Initialize paginated response.

        Args:
            data: Response data
            headers: Response headers
            url: Request URL
        """
        self.data = data
        self.headers = headers
        self.url = url
        self.link_header = LinkHeader(headers.get("Link"))

    @property
    def has_next_page(self) -> bool:
        """Check if there's a next page."""
        return self.link_header.has_next

    @property
    def next_page_url(self) -> str | None:
        """Get URL for next page."""
        return self.link_header.next_url

    @property
    def items(self) -> list[dict[str, Any]]:
        """Get items from current page."""
        return self.data


class AsyncPaginator:
    """Page-by-page walk over a paginated GitHub API listing.

    Query parameters are sent with the first request only; subsequent
    requests follow the ``rel="next"`` URL verbatim, which already carries
    them. Iteration stops as soon as a page advertises no next link, or
    earlier if the consumer stops iterating; deployment lookup relies on
    the latter to stop at the first successful deployment.
    """

    def __init__(
        self,
        client: Any,  # Avoid circular import
        initial_url: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
    ):
        """Initialize async paginator.

        Args:
            client: GitHub client instance
            initial_url: Initial URL to fetch
            params: Query parameters
            per_page: Items per page (max 100 for GitHub)
        """
        self.client = client
        self.initial_url = initial_url
        self.params = dict(params or {})
        self.per_page = min(per_page, 100)  # GitHub max is 100
        self.params["per_page"] = self.per_page

        self.pages_fetched = 0

    async def pages(self) -> AsyncIterator[PaginatedResponse]:
        """Yield one PaginatedResponse per fetched page."""
        next_url: str | None = self.initial_url
        params: dict[str, Any] | None = self.params

        while next_url:
            response: PaginatedResponse = await self.client._fetch_page(
                next_url, params
            )
            self.pages_fetched += 1
            params = None

            next_url = response.next_page_url if response.has_next_page else None
            yield response


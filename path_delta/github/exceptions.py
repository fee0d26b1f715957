"""GitHub API errors.

The client raises one of these for every failed request. Delta resolution
only looks at the class and at ``status_code``; it turns them into
``RevisionError``/``DiffError`` or, for skippable lookups, logs them.
"""


class GitHubError(Exception):
    """A GitHub request failed.

    ``status_code`` is None when no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthenticationError(GitHubError):
    """The token is missing, invalid or lacks access (401, or 403 without rate limiting)."""


class GitHubRateLimitError(GitHubError):
    """403 caused by an exhausted rate limit.

    ``reset_time`` is the Unix time at which the limit resets, if reported.
    """

    def __init__(self, message: str, reset_time: int | None = None):
        super().__init__(message, status_code=403)
        self.reset_time = reset_time


class GitHubNotFoundError(GitHubError):
    """Unknown repository, ref, deployment or commit (404)."""


class GitHubValidationError(GitHubError):
    """Request rejected as unprocessable (422), e.g. an unknown compare base."""


class GitHubServerError(GitHubError):
    """GitHub answered with a 5xx status."""


class GitHubConnectionError(GitHubError):
    """No response: the connection failed or the session could not be opened."""


class GitHubTimeoutError(GitHubConnectionError):
    """No response within the configured timeout."""

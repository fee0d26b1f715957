"""Action input model.

Inputs come from the environment the GitHub Actions runner prepares:
``INPUT_*`` variables for the action's declared inputs and ``GITHUB_*``
variables describing the run. The model is built once at the entry point
and passed to the engine; nothing else reads the environment.
"""

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from path_delta.delta.models import DiffMode, RepositoryCoordinates

PATTERN_SEPARATOR = "\n"


def split_patterns(raw: str) -> list[str]:
    """Split a newline-separated pattern input, dropping blank entries."""
    return [line.strip() for line in raw.split(PATTERN_SEPARATOR) if line.strip()]


def _env(name: str, field_name: str) -> Any:
    return AliasChoices(name, field_name)


class ActionInputs(BaseSettings):
    """Inputs of a delta detection run.

    Environment variables:
    - INPUT_ENVIRONMENT: Deployment environment used to find the base revision
    - INPUT_BRANCH: Branch whose tip is the base when no environment is given
    - INPUT_COMMIT: Explicit current revision (overrides GITHUB_SHA)
    - INPUT_INCLUDES / INPUT_EXCLUDES: Newline-separated glob patterns
    - INPUT_GITHUB_TOKEN: Token for the GitHub API
    - INPUT_OFFLINE: Use the local repository instead of the GitHub API
    - GITHUB_SHA, GITHUB_REPOSITORY, GITHUB_API_URL, GITHUB_OUTPUT: Runner context
    """

    environment: str = Field(
        default="",
        validation_alias=_env("INPUT_ENVIRONMENT", "environment"),
        description="Deployment environment name",
    )
    branch: str = Field(
        default="",
        validation_alias=_env("INPUT_BRANCH", "branch"),
        description="Branch name used as base when no environment is given",
    )
    commit: str = Field(
        default="",
        validation_alias=_env("INPUT_COMMIT", "commit"),
        description="Explicit current revision",
    )
    includes: str = Field(
        default="",
        validation_alias=_env("INPUT_INCLUDES", "includes"),
        description="Newline-separated include globs",
    )
    excludes: str = Field(
        default="",
        validation_alias=_env("INPUT_EXCLUDES", "excludes"),
        description="Newline-separated exclude globs",
    )
    github_token: str = Field(
        default="",
        validation_alias=_env("INPUT_GITHUB_TOKEN", "github_token"),
        description="GitHub API token",
        repr=False,
    )
    offline: bool = Field(
        default=False,
        validation_alias=_env("INPUT_OFFLINE", "offline"),
        description="Resolve and diff in the local repository",
    )

    sha: str = Field(default="", validation_alias=_env("GITHUB_SHA", "sha"))
    repository: str = Field(
        default="", validation_alias=_env("GITHUB_REPOSITORY", "repository")
    )
    api_url: str = Field(
        default="https://api.github.com",
        validation_alias=_env("GITHUB_API_URL", "api_url"),
    )
    ref: str = Field(default="", validation_alias=_env("GITHUB_REF", "ref"))
    workflow: str = Field(default="", validation_alias=_env("GITHUB_WORKFLOW", "workflow"))
    event_name: str = Field(
        default="", validation_alias=_env("GITHUB_EVENT_NAME", "event_name")
    )
    job: str = Field(default="", validation_alias=_env("GITHUB_JOB", "job"))
    output_path: str | None = Field(
        default=None, validation_alias=_env("GITHUB_OUTPUT", "output_path")
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("offline", mode="before")
    @classmethod
    def empty_offline_is_false(cls, v: Any) -> Any:
        """Unset action inputs arrive as empty strings."""
        if isinstance(v, str) and not v.strip():
            return False
        return v

    @field_validator("api_url", mode="before")
    @classmethod
    def default_api_url(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return "https://api.github.com"
        return v

    @property
    def include_patterns(self) -> list[str]:
        return split_patterns(self.includes)

    @property
    def exclude_patterns(self) -> list[str]:
        return split_patterns(self.excludes)

    @property
    def current_revision(self) -> str:
        return self.commit or self.sha

    @property
    def coordinates(self) -> RepositoryCoordinates:
        return RepositoryCoordinates.parse(self.repository)

    @property
    def mode(self) -> DiffMode:
        return DiffMode.LOCAL if self.offline else DiffMode.REMOTE

    @property
    def requires_token(self) -> bool:
        """A token is needed whenever the GitHub API will be called."""
        return not self.offline or bool(self.environment)

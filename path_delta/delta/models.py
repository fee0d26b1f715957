"""Data models for delta resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SUCCESS_STATE = "success"


class DiffMode(str, Enum):
    """Where revisions are resolved and diffs are computed."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class RepositoryCoordinates:
    """Owner and name of a hosted repository."""

    owner: str
    name: str

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryCoordinates":
        """Split ``owner/repo`` into its parts.

        The last segment is always the repository name and everything before
        it is the owner, so ``org/owner/repo`` yields owner ``org/owner``.
        A value without ``/`` has an empty owner.
        """
        owner, _, name = full_name.rpartition("/")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}" if self.owner else self.name


@dataclass(frozen=True)
class DeploymentStatus:
    """A single status record of a deployment."""

    state: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentStatus":
        return cls(state=data.get("state") or "")


@dataclass(frozen=True)
class DeploymentRecord:
    """A deployment and the statuses fetched for it, newest first."""

    id: int
    sha: str
    statuses: tuple[DeploymentStatus, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentRecord":
        return cls(id=int(data["id"]), sha=data.get("sha") or "")

    def with_statuses(self, statuses: list[dict[str, Any]]) -> "DeploymentRecord":
        """Return a copy carrying the given raw status records."""
        return DeploymentRecord(
            id=self.id,
            sha=self.sha,
            statuses=tuple(DeploymentStatus.from_dict(s) for s in statuses),
        )

    @property
    def latest_status(self) -> DeploymentStatus | None:
        return self.statuses[0] if self.statuses else None

    @property
    def is_successful(self) -> bool:
        """A deployment is successful only if its latest status is success."""
        latest = self.latest_status
        return latest is not None and latest.state == SUCCESS_STATE


@dataclass(frozen=True)
class DeltaResult:
    """Filtered changed paths between the base and current revisions."""

    files: list[str] = field(default_factory=list)

    @property
    def detected(self) -> bool:
        return len(self.files) > 0

    def to_dict(self) -> dict[str, Any]:
        return {"detected": self.detected, "files": list(self.files)}

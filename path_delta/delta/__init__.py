"""Delta resolution: base revision, changed paths and path filtering."""

from .diff import DiffProvider, LocalDiffProvider, RemoteDiffProvider
from .engine import DeltaEngine, create_diff_provider, create_engine, create_revision_strategy
from .exceptions import DeltaError, DiffError, PatternError, RevisionError
from .models import (
    DeltaResult,
    DeploymentRecord,
    DeploymentStatus,
    DiffMode,
    RepositoryCoordinates,
)
from .patterns import PathFilter, compile_glob, filter_paths, match_glob, matches_any
from .revisions import BranchRevisionStrategy, DeploymentRevisionStrategy, RevisionStrategy

__all__ = [
    "BranchRevisionStrategy",
    "DeltaEngine",
    "DeltaError",
    "DeltaResult",
    "DeploymentRecord",
    "DeploymentRevisionStrategy",
    "DeploymentStatus",
    "DiffError",
    "DiffMode",
    "DiffProvider",
    "LocalDiffProvider",
    "PathFilter",
    "PatternError",
    "RemoteDiffProvider",
    "RepositoryCoordinates",
    "RevisionError",
    "RevisionStrategy",
    "compile_glob",
    "create_diff_provider",
    "create_engine",
    "create_revision_strategy",
    "filter_paths",
    "match_glob",
    "matches_any",
]

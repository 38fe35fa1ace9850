"""Domain models and repository graph logic."""

from .models import (
    BuildOutcome,
    ChangeSet,
    ConfigError,
    GlobalConfig,
    LockEntry,
    MergeOutcome,
    RepoFailure,
    RepoSpec,
    RepoStatus,
    SyncResult,
)
from .repo_graph import check_unique_names, descendants_of, topological_order

__all__ = [
    "BuildOutcome",
    "ChangeSet",
    "ConfigError",
    "GlobalConfig",
    "LockEntry",
    "MergeOutcome",
    "RepoFailure",
    "RepoSpec",
    "RepoStatus",
    "SyncResult",
    "check_unique_names",
    "descendants_of",
    "topological_order",
]

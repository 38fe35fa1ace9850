"""Domain data structures."""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

DEFAULT_BUILD_SCRIPT = "test/build.py"
DEFAULT_TEST_DIR = "test/core"
DEFAULT_TEST_EXTENSION = ".wast"
DEFAULT_DOCUMENT_DIR = "document"


class ConfigError(ValueError):
    """Raised for invalid configuration or an unusable repository graph."""


@dataclass(frozen=True)
class RepoSpec:
    """A single proposal repository declared in the configuration."""

    name: str
    url: str
    parent: Optional[str] = None
    commit: Optional[str] = None
    skip_merge: bool = False
    directive: Optional[str] = None
    included_tests: Tuple[str, ...] = ()
    excluded_tests: Tuple[str, ...] = ()
    skip_wast: bool = False
    skip_wpt: bool = False
    skip_js: bool = False


@dataclass(frozen=True)
class GlobalConfig:
    """Whole-run settings plus the ordered repository list."""

    repos: Tuple[RepoSpec, ...] = ()
    harness_directive: Optional[str] = None
    directive: Optional[str] = None
    included_tests: Tuple[str, ...] = ()
    excluded_tests: Tuple[str, ...] = ()
    build_script: str = DEFAULT_BUILD_SCRIPT
    test_dir: str = DEFAULT_TEST_DIR
    test_extension: str = DEFAULT_TEST_EXTENSION
    document_dir: str = DEFAULT_DOCUMENT_DIR

    def find_repo(self, name: str) -> Optional[RepoSpec]:
        for repo in self.repos:
            if repo.name == name:
                return repo
        return None


@dataclass(frozen=True)
class LockEntry:
    name: str
    commit: str


class MergeOutcome(enum.Enum):
    UNMERGED = "unmerged"
    MERGED = "merged"
    CONFLICTED = "conflicted"


@dataclass(frozen=True)
class BuildOutcome:
    """Result of running the test generation tool.

    ``built`` is False when the tool failed on every attempt; generated
    categories are then skipped while source tests are still copied.
    """

    built: bool
    attempts: int = 1


@dataclass(frozen=True)
class ChangeSet:
    """Base names of source test files eligible for copying.

    For a root repository ``names`` lists every test file found.
    """

    names: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class SyncResult:
    repo_dir: str
    commit_base_hash: str


@dataclass
class RepoStatus:
    """Per-repository pipeline result used for the status report."""

    name: str
    commit_base_hash: str
    commit_summary: str
    merged: MergeOutcome
    built: bool
    changed_files: Tuple[str, ...] = ()
    copied: dict = field(default_factory=dict)

    def report_line(self) -> str:
        state = "building" if self.built else "broken"
        return f"{self.name}: ({self.merged.value} {state}) {self.commit_summary}"


@dataclass(frozen=True)
class RepoFailure:
    name: str
    detail: str

    def report_line(self) -> str:
        return f"{self.name}: (failure) {self.detail}"

# Change detection module: which source tests differ from the parent proposal
#
# Main functions:
#   - list_test_files(): every test file under the source tests directory
#   - detect_changes(): ChangeSet for a root or child repository
#
# Note:
#   - files are tracked by base name, so same-named files in different
#     subdirectories cannot be told apart by the file selector

import posixpath
from pathlib import Path
from typing import List

from .git import PARENT_TIP, git
from ..domain.models import DEFAULT_TEST_DIR, DEFAULT_TEST_EXTENSION, ChangeSet, RepoSpec
from ..infra.logger import log_info


def list_test_files(test_root: Path, extension: str = DEFAULT_TEST_EXTENSION) -> List[Path]:
    """Return test files under ``test_root`` sorted by path."""
    if not test_root.is_dir():
        return []
    return sorted(
        path for path in test_root.rglob(f"*{extension}")
        if path.is_file()
    )


def changed_paths(repo_dir: Path, test_dir: str = DEFAULT_TEST_DIR) -> List[str]:
    """Paths under ``test_dir`` that are new or modified relative to the parent tip."""
    output = git(
        repo_dir,
        "-c",
        "core.quotepath=off",
        "diff",
        "--name-only",
        "--diff-filter=d",
        PARENT_TIP,
        "HEAD",
        "--",
        test_dir,
    )
    return [line.strip() for line in output.splitlines() if line.strip()]


def detect_changes(
    spec: RepoSpec,
    repo_dir: Path,
    test_dir: str = DEFAULT_TEST_DIR,
    extension: str = DEFAULT_TEST_EXTENSION,
) -> ChangeSet:
    """Compute the base names of source tests eligible for copying.

    Raises:
        CommandError: the diff against the parent could not be computed
    """
    if spec.parent is None:
        names = frozenset(path.name for path in list_test_files(repo_dir / test_dir, extension))
        log_info(f"{spec.name}: root repository, {len(names)} test files eligible")
        return ChangeSet(names=names)

    names = frozenset(
        posixpath.basename(path)
        for path in changed_paths(repo_dir, test_dir)
        if path.endswith(extension)
    )
    log_info(f"{spec.name}: changed files {sorted(names)}")
    return ChangeSet(names=names)

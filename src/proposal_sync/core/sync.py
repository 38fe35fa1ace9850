# Repository sync module: bring one clone to a deterministic base revision
#
# Main functions:
#   - sync_repo(): clone if needed, fetch origin, hard-reset to the base revision
#   - resolve_base_revision(): pinned commit, lock entry or upstream tip
#
# Features:
#   - child repositories get a `parent` remote and a local integration branch
#   - every git failure raises CommandError; nothing is retried here

import shutil
from pathlib import Path
from typing import Optional

from .git import (
    INTEGRATION_BRANCH,
    ORIGIN_TIP,
    PARENT_REMOTE,
    PARENT_TIP,
    PRIMARY_BRANCH,
    git,
    git_ok,
    hard_reset,
    short_head,
)
from .lock_store import LockStore
from ..domain.models import ConfigError, GlobalConfig, RepoSpec, SyncResult
from ..infra.logger import log_info, log_warning
from ..infra.paths import repo_clone_dir


def resolve_base_revision(spec: RepoSpec, lock: Optional[LockStore]) -> str:
    """Pick the revision the primary branch is reset to.

    An explicit ``commit`` in the configuration wins, then the lock entry,
    then the upstream default branch.
    """
    if spec.commit:
        return spec.commit
    if lock is not None:
        pinned = lock.get(spec.name)
        if pinned:
            return pinned
    return ORIGIN_TIP


def _clone(spec: RepoSpec, repos_dir: Path, repo_dir: Path) -> None:
    if repo_dir.exists():
        # Leftover directory without git metadata: start over
        log_warning(f"{repo_dir} is not a git clone, removing it before cloning")
        shutil.rmtree(repo_dir)

    repos_dir.mkdir(parents=True, exist_ok=True)
    log_info(f"cloning {spec.name} from {spec.url}")
    git(repos_dir, "clone", spec.url, repo_dir.name)


def _ensure_parent_link(repo_dir: Path, parent_url: str) -> None:
    """Register the parent remote and the integration branch when missing."""
    remotes = git(repo_dir, "remote").split()
    relinked = True
    if PARENT_REMOTE not in remotes:
        git(repo_dir, "remote", "add", PARENT_REMOTE, parent_url)
    elif git(repo_dir, "remote", "get-url", PARENT_REMOTE).strip() != parent_url:
        git(repo_dir, "remote", "set-url", PARENT_REMOTE, parent_url)
    else:
        relinked = False

    if relinked or not git_ok(repo_dir, "rev-parse", "--verify", "-q", PARENT_TIP):
        # set-head needs the remote branches to exist locally; an earlier run
        # may have died before parent/HEAD was recorded
        git(repo_dir, "fetch", PARENT_REMOTE)
        git(repo_dir, "remote", "set-head", PARENT_REMOTE, "--auto")

    branches = git(repo_dir, "branch", "--list", INTEGRATION_BRANCH)
    if not branches.strip():
        git(repo_dir, "branch", INTEGRATION_BRANCH)


def sync_repo(
    spec: RepoSpec,
    config: GlobalConfig,
    repos_dir: Path,
    lock: Optional[LockStore] = None,
) -> SyncResult:
    """Guarantee a clone of ``spec`` positioned at its base revision.

    Args:
        spec: repository to sync
        config: whole-run configuration (used to look up the parent's url)
        repos_dir: directory holding every clone
        lock: pinned commits from the previous successful run

    Returns:
        SyncResult with the clone location and the short base hash

    Raises:
        CommandError: any git operation failed
    """
    repo_dir = repo_clone_dir(repos_dir, spec.name)
    if not (repo_dir / ".git").exists():
        _clone(spec, repos_dir, repo_dir)

    if spec.parent is not None:
        parent = config.find_repo(spec.parent)
        if parent is None:
            raise ConfigError(f"repository {spec.name} references unknown parent {spec.parent}")
        _ensure_parent_link(repo_dir, parent.url)

    git(repo_dir, "fetch", "origin")

    base_revision = resolve_base_revision(spec, lock)
    if base_revision == ORIGIN_TIP and not git_ok(repo_dir, "rev-parse", "--verify", "-q", ORIGIN_TIP):
        # Clones made by hand may lack origin/HEAD
        git(repo_dir, "remote", "set-head", "origin", "--auto")
    git(repo_dir, "checkout", "-f", "-B", PRIMARY_BRANCH)
    hard_reset(repo_dir, base_revision)

    commit_base_hash = short_head(repo_dir)
    log_info(f"{spec.name} synced to {commit_base_hash} (base {base_revision})")
    return SyncResult(repo_dir=str(repo_dir), commit_base_hash=commit_base_hash)

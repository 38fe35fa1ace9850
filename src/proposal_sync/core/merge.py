# Merge module: integrate the parent proposal into a synced repository
#
# Main functions:
#   - merge_parent(): merge parent/HEAD into the integration branch
#
# Conflict policy:
#   - any conflict first retries with the local version of the document
#     directory forced into the merge
#   - if that still fails the merge is aborted and the integration branch is
#     reset to the base hash (MergeOutcome.CONFLICTED)

from pathlib import Path

from .git import INTEGRATION_BRANCH, PARENT_REMOTE, PARENT_TIP, git, git_ok, hard_reset
from ..domain.models import DEFAULT_DOCUMENT_DIR, MergeOutcome, RepoSpec
from ..infra.logger import log_info, log_success, log_warning


def merge_message(spec: RepoSpec, commit_base_hash: str) -> str:
    return f"Merging {spec.name}:{commit_base_hash} with {spec.parent}"


def _override_document_dir(repo_dir: Path, document_dir: str) -> bool:
    """Keep our side of ``document_dir`` and try to finish the merge."""
    return (
        git_ok(repo_dir, "checkout", "--ours", document_dir)
        and git_ok(repo_dir, "add", document_dir)
        and git_ok(repo_dir, "-c", "core.editor=true", "merge", "--continue")
    )


def merge_parent(
    spec: RepoSpec,
    repo_dir: Path,
    commit_base_hash: str,
    document_dir: str = DEFAULT_DOCUMENT_DIR,
) -> MergeOutcome:
    """Merge the parent proposal's tip on top of ``commit_base_hash``.

    Returns:
        UNMERGED when no parent is merged, MERGED when the merge went through
        (possibly after the document override), CONFLICTED when it was
        abandoned and the working copy is back at the base hash.

    Raises:
        CommandError: fetching, switching branches or resetting failed
    """
    if spec.parent is None:
        return MergeOutcome.UNMERGED

    git(repo_dir, "fetch", PARENT_REMOTE)
    if spec.skip_merge:
        log_info(f"{spec.name}: merging with {spec.parent} disabled")
        return MergeOutcome.UNMERGED

    git(repo_dir, "checkout", "-f", INTEGRATION_BRANCH)
    hard_reset(repo_dir, commit_base_hash)

    message = merge_message(spec, commit_base_hash)
    if git_ok(repo_dir, "merge", "-q", PARENT_TIP, "-m", message):
        log_success(f"{spec.name}: merged {spec.parent} cleanly")
        return MergeOutcome.MERGED

    log_warning(f"{spec.name}: conflicts merging {spec.parent}, keeping local {document_dir}/")
    if _override_document_dir(repo_dir, document_dir):
        log_success(f"{spec.name}: merged {spec.parent} with local {document_dir}/")
        return MergeOutcome.MERGED

    log_warning(f"{spec.name}: failed to merge {spec.parent}, resetting to {commit_base_hash}")
    if not git_ok(repo_dir, "merge", "--abort"):
        log_warning(f"{spec.name}: no merge to abort, resetting anyway")
    hard_reset(repo_dir, commit_base_hash)
    return MergeOutcome.CONFLICTED

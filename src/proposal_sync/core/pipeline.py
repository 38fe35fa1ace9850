# Per-repository pipeline
#
# sync -> merge parent -> build tests -> detect changes -> select -> copy
#
# Every stage receives the clone directory explicitly; the process working
# directory is never changed.

from pathlib import Path
from typing import Optional

from .build import build_tests
from .changes import detect_changes
from .consolidate import consolidate
from .git import head_summary
from .lock_store import LockStore
from .merge import merge_parent
from .selector import FileSelector
from .sync import sync_repo
from ..domain.models import GlobalConfig, RepoSpec, RepoStatus


def process_repo(
    spec: RepoSpec,
    config: GlobalConfig,
    repos_dir: Path,
    output_dir: Path,
    lock: Optional[LockStore] = None,
) -> RepoStatus:
    """Run the full integration pipeline for one repository.

    Raises:
        CommandError: a git operation outside the recoverable merge/build
            steps failed
        ConfigError: a configured include/exclude pattern is invalid
    """
    synced = sync_repo(spec, config, repos_dir, lock)
    repo_dir = Path(synced.repo_dir)
    base_hash = synced.commit_base_hash

    merged = merge_parent(spec, repo_dir, base_hash, config.document_dir)
    build = build_tests(spec, repo_dir, base_hash, config.build_script)
    summary = head_summary(repo_dir)

    changes = detect_changes(spec, repo_dir, config.test_dir, config.test_extension)
    selector = FileSelector.build(spec, config, changes)
    copied = consolidate(spec, config, repo_dir, output_dir, selector, build.built)

    return RepoStatus(
        name=spec.name,
        commit_base_hash=base_hash,
        commit_summary=summary,
        merged=merged,
        built=build.built,
        changed_files=tuple(sorted(changes.names)),
        copied=copied,
    )

"""Run the external test generation tool with one fallback retry."""

import shutil
import sys
from pathlib import Path
from typing import List

from .git import hard_reset
from .process_control import CommandError, run_command
from ..domain.models import DEFAULT_BUILD_SCRIPT, BuildOutcome, RepoSpec
from ..infra.logger import log_error, log_success, log_warning
from ..infra.paths import GENERATED_JS_DIR, GENERATED_WPT_DIR


def build_command(build_script: str) -> List[str]:
    return [
        sys.executable,
        build_script,
        "--use-sync",
        "--js",
        f"./{GENERATED_JS_DIR}",
        "--html",
        f"./{GENERATED_WPT_DIR}",
    ]


def remove_generated_dirs(repo_dir: Path) -> None:
    for name in (GENERATED_JS_DIR, GENERATED_WPT_DIR):
        shutil.rmtree(repo_dir / name, ignore_errors=True)


def run_build(repo_dir: Path, build_script: str = DEFAULT_BUILD_SCRIPT) -> bool:
    """One build attempt from a clean slate; True when the tool exits 0."""
    remove_generated_dirs(repo_dir)
    try:
        run_command(build_command(build_script), cwd=repo_dir)
    except CommandError as exc:
        log_warning(f"test generation failed: {exc}")
        return False
    return True


def build_tests(
    spec: RepoSpec,
    repo_dir: Path,
    commit_base_hash: str,
    build_script: str = DEFAULT_BUILD_SCRIPT,
) -> BuildOutcome:
    """Generate the js/ and wpt/ trees for the current working copy.

    A failure in a repository with a parent is blamed on the parent's
    changes: the working copy is reset to ``commit_base_hash`` and the build
    is retried once. Tool failures never raise; they end as ``built=False``.

    Raises:
        CommandError: the reset before the retry failed
    """
    if run_build(repo_dir, build_script):
        log_success(f"{spec.name}: tests generated")
        return BuildOutcome(built=True, attempts=1)

    if spec.parent is None:
        log_error(f"{spec.name}: failed to generate tests, won't emit js/wpt")
        return BuildOutcome(built=False, attempts=1)

    log_warning(f"{spec.name}: failed to generate tests, retrying on {commit_base_hash}")
    hard_reset(repo_dir, commit_base_hash)
    if run_build(repo_dir, build_script):
        log_success(f"{spec.name}: tests generated on {commit_base_hash}")
        return BuildOutcome(built=True, attempts=2)

    log_error(f"{spec.name}: failed to generate tests, won't emit js/wpt")
    return BuildOutcome(built=False, attempts=2)

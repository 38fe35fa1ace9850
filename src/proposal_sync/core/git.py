"""Thin git command wrappers bound to an explicit repository directory."""

from pathlib import Path

from .process_control import CommandError, run_command
from ..infra.logger import log_warning

PRIMARY_BRANCH = "sync-base"
INTEGRATION_BRANCH = "try-merge"
PARENT_REMOTE = "parent"
ORIGIN_REMOTE = "origin"

# Remote default branches, resolved through refs/remotes/<remote>/HEAD
ORIGIN_TIP = f"{ORIGIN_REMOTE}/HEAD"
PARENT_TIP = f"{PARENT_REMOTE}/HEAD"


def git(repo_dir: Path, *args: str) -> str:
    """Run ``git <args>`` inside ``repo_dir`` and return stdout.

    Raises:
        CommandError: git exited non-zero or could not be started.
    """
    return run_command(["git", *args], cwd=repo_dir)


def git_ok(repo_dir: Path, *args: str) -> bool:
    """Run a git command whose failure is an expected outcome."""
    try:
        git(repo_dir, *args)
    except CommandError as exc:
        log_warning(f"git {' '.join(args)} failed: {exc}")
        return False
    return True


def short_head(repo_dir: Path) -> str:
    return git(repo_dir, "log", "--pretty=%h", "-n", "1").strip()


def head_summary(repo_dir: Path) -> str:
    return git(repo_dir, "log", "--oneline", "-n", "1").strip()


def hard_reset(repo_dir: Path, revision: str) -> None:
    git(repo_dir, "reset", "--hard", revision)

"""Application service running the pipeline over every configured repository."""

import shutil
import time
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..core.lock_store import LockStore
from ..core.pipeline import process_repo
from ..core.repo_config import load_config
from ..domain.models import ConfigError, RepoFailure, RepoStatus
from ..domain.repo_graph import descendants_of, topological_order
from ..infra.logger import log_error, log_info, log_success, log_warning
from ..infra.paths import STATUS_REPORT_NAME


def prepare_workspace(repos_dir: Path, output_dir: Path) -> None:
    """Create the clones directory and drop the previous output tree."""
    log_info("cleaning output tree")
    repos_dir.mkdir(parents=True, exist_ok=True)
    if output_dir.exists():
        shutil.rmtree(output_dir)


def render_status_report(statuses: List[RepoStatus], failures: List[RepoFailure]) -> str:
    lines = [status.report_line() for status in statuses]
    lines.extend(failure.report_line() for failure in failures)
    return "\n".join(lines) + "\n" if lines else ""


def write_status_report(output_dir: Path, statuses: List[RepoStatus], failures: List[RepoFailure]) -> Path:
    report_path = output_dir / STATUS_REPORT_NAME
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(render_status_report(statuses, failures), encoding="utf-8")
    return report_path


def run_consolidation(
    config_file: Path,
    lock_file: Path,
    repos_dir: Path,
    output_dir: Path,
    update: bool = False,
    keep_going: bool = False,
) -> Tuple[bool, Dict[str, Any], str]:
    """Process every repository in parent-first order.

    Args:
        config_file: TOML configuration
        lock_file: pinned commits, read at start and rewritten on full success
        repos_dir: directory holding the clones
        output_dir: consolidated tests tree
        update: ignore pinned commits and move to the latest upstream state
        keep_going: keep processing after a repository fails (its
            descendants are still skipped)

    Returns:
        ``(success, result, error)``; ``error`` is only set when the run could
        not start at all (configuration problems).
    """
    start_time = time.time()
    try:
        config = load_config(config_file)
        ordered = topological_order(config.repos)
        pinned = LockStore() if update else LockStore.load(lock_file)
    except ConfigError as exc:
        log_error(str(exc))
        return False, {}, str(exc)

    if update:
        log_info("update requested, ignoring pinned commits")

    prepare_workspace(repos_dir, output_dir)

    new_lock = LockStore()
    statuses: List[RepoStatus] = []
    failures: List[RepoFailure] = []
    blocked: Dict[str, str] = {}

    for spec in ordered:
        if spec.name in blocked:
            failure = RepoFailure(spec.name, f"skipped, parent {blocked[spec.name]} failed")
            log_warning(failure.report_line())
            failures.append(failure)
            continue

        log_info(f"==== {spec.name} ====")
        try:
            status = process_repo(spec, config, repos_dir, output_dir, pinned)
        except Exception as exc:
            failure = RepoFailure(spec.name, str(exc) or type(exc).__name__)
            log_error(failure.report_line())
            failures.append(failure)
            if not keep_going:
                break
            for child in descendants_of(ordered, spec.name):
                blocked.setdefault(child, spec.name)
        else:
            new_lock.record(spec.name, status.commit_base_hash)
            statuses.append(status)
            log_success(status.report_line())
        finally:
            log_info(f"==== {spec.name} done ====")

    log_info("all repositories processed" if not failures else "run finished with failures")
    report_path = write_status_report(output_dir, statuses, failures)

    lock_written = ""
    if failures:
        log_warning(f"{len(failures)} repositories failed, lock file left untouched")
        for failure in failures:
            log_error(failure.report_line())
    else:
        new_lock.save(lock_file)
        lock_written = str(lock_file)

    result = {
        "total": len(ordered),
        "success": len(statuses),
        "fail": len(failures),
        "duration": int(time.time() - start_time),
        "statuses": [status.report_line() for status in statuses],
        "copied": {status.name: dict(status.copied) for status in statuses},
        "changed": {status.name: list(status.changed_files) for status in statuses},
        "failures": {failure.name: failure.detail for failure in failures},
        "report_file": str(report_path),
        "lock_file": lock_written,
    }
    return not failures, result, ""

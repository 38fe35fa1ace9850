# Command line module
#
# Main functions:
#   - parse_args(): command line parsing and validation
#   - print_summary(): final statistics
#   - main(): run the consolidation and map the outcome to an exit code

import argparse
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from .application.execution import run_consolidation
from .core.process_control import terminate_all_tracked_processes
from .infra.logger import log_error, log_info, log_success
from .infra.paths import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_LOCK_FILE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REPOS_DIR,
    resolve_path,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="proposal-tests-sync",
        description="Consolidate proposal repositories' conformance tests into one tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s                          # use config.toml and config.lock
  %(prog)s -u                       # ignore pinned commits, track upstream
  %(prog)s -k                       # keep going after a repository fails
  %(prog)s -c proposals.toml --output-dir out/tests

The lock file is rewritten only when every repository succeeded.
        """,
    )
    parser.add_argument(
        '-c', '--config',
        default=DEFAULT_CONFIG_FILE,
        metavar='FILE',
        help=f'configuration file (default: {DEFAULT_CONFIG_FILE})',
    )
    parser.add_argument(
        '-l', '--lock',
        default=DEFAULT_LOCK_FILE,
        metavar='FILE',
        help=f'lock file with pinned base commits (default: {DEFAULT_LOCK_FILE})',
    )
    parser.add_argument(
        '--repos-dir',
        default=DEFAULT_REPOS_DIR,
        metavar='DIR',
        help=f'directory holding the clones (default: {DEFAULT_REPOS_DIR})',
    )
    parser.add_argument(
        '--output-dir',
        default=DEFAULT_OUTPUT_DIR,
        metavar='DIR',
        help=f'consolidated tests tree (default: {DEFAULT_OUTPUT_DIR})',
    )
    parser.add_argument(
        '-u', '--update',
        action='store_true',
        help='ignore the lock file and reset every repository to its upstream tip',
    )
    parser.add_argument(
        '-k', '--keep-going',
        action='store_true',
        help='continue with unrelated repositories after a failure',
    )
    return parser.parse_args(argv)


def print_summary(result: Dict[str, Any], start_time: float) -> None:
    duration = int(time.time() - start_time)
    minutes, seconds = divmod(duration, 60)

    print()
    log_info("========== run finished ==========")
    log_info(f"repositories: {result.get('total', 0)}")
    log_success(f"succeeded: {result.get('success', 0)}")
    for name, counts in result.get("copied", {}).items():
        copied = ", ".join(f"{category} {count}" for category, count in counts.items()) or "nothing"
        changed = len(result.get("changed", {}).get(name, ()))
        log_info(f"  {name}: copied {copied} ({changed} changed tests)")
    if result.get("fail"):
        log_error(f"failed: {result['fail']}")
        for name, detail in result.get("failures", {}).items():
            log_error(f"  {name}: {detail}")
    if result.get("lock_file"):
        log_info(f"lock file: {result['lock_file']}")
    log_info(f"elapsed: {minutes}m {seconds}s")
    log_info("==================================")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    base_dir = Path.cwd()
    start_time = time.time()

    try:
        success, result, error = run_consolidation(
            config_file=resolve_path(args.config, base_dir),
            lock_file=resolve_path(args.lock, base_dir),
            repos_dir=resolve_path(args.repos_dir, base_dir),
            output_dir=resolve_path(args.output_dir, base_dir),
            update=args.update,
            keep_going=args.keep_going,
        )
    except KeyboardInterrupt:
        terminate_all_tracked_processes()
        log_error("interrupted, lock file left untouched")
        return EXIT_INTERRUPTED

    if error:
        log_error(f"cannot start: {error}")
        return EXIT_FAILURE

    print_summary(result, start_time)
    return EXIT_OK if success else EXIT_FAILURE

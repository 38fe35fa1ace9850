# Consolidation module: copy selected tests into the shared output tree
#
# Main functions:
#   - copy_tests(): copy one category tree into tests/<category>/<repo>/
#   - write_directives(): harness and repository directive files (js only)
#   - consolidate(): all categories for one repository
#
# Output layout:
#   tests/wast/<repo>/test/core/...   source tests (copied even when the build failed)
#   tests/wpt/<repo>/...              generated web-platform tests
#   tests/js/<repo>/...               generated script tests + directives.txt

import shutil
from pathlib import Path
from typing import Dict, List, Tuple

from .selector import FileSelector
from ..domain.models import GlobalConfig, RepoSpec
from ..infra.logger import log_info, log_warning
from ..infra.paths import (
    GENERATED_JS_DIR,
    GENERATED_WPT_DIR,
    JS_CATEGORY,
    WAST_CATEGORY,
    WPT_CATEGORY,
    category_output_dir,
)

HARNESS_DIRECTIVES_FILE = "harness/directives.txt"
DIRECTIVES_FILE = "directives.txt"


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_tests(source_root: Path, destination_root: Path, selector: FileSelector) -> int:
    """Copy every selected file below ``source_root``; return how many were copied."""
    if not source_root.is_dir():
        log_warning(f"nothing to copy, {source_root} does not exist")
        return 0

    copied = 0
    for path in sorted(source_root.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(source_root).as_posix()
        if not selector.is_selected(relative):
            continue

        destination = destination_root / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(path, destination)
        copied += 1
    return copied


def combined_directive(spec: RepoSpec, config: GlobalConfig) -> str:
    return f"{config.directive or ''}{spec.directive or ''}"


def write_directives(spec: RepoSpec, config: GlobalConfig, output_dir: Path) -> List[Path]:
    """Write directive files for the js category; return the files written."""
    js_dir = category_output_dir(output_dir, JS_CATEGORY, spec.name)
    written: List[Path] = []

    if config.harness_directive is not None:
        path = js_dir / HARNESS_DIRECTIVES_FILE
        write_text(path, config.harness_directive)
        written.append(path)

    directives = combined_directive(spec, config)
    if directives:
        path = js_dir / DIRECTIVES_FILE
        write_text(path, directives)
        written.append(path)

    return written


def category_sources(
    spec: RepoSpec, config: GlobalConfig, repo_dir: Path, built: bool
) -> List[Tuple[str, Path, str]]:
    """(category, source tree, destination prefix) triples for this repository.

    Source tests keep their location inside the repository
    (tests/wast/<repo>/test/core/...); generated trees are copied flat.
    """
    sources: List[Tuple[str, Path, str]] = []
    if not spec.skip_wast:
        sources.append((WAST_CATEGORY, repo_dir / config.test_dir, config.test_dir))
    if built:
        if not spec.skip_wpt:
            sources.append((WPT_CATEGORY, repo_dir / GENERATED_WPT_DIR, ""))
        if not spec.skip_js:
            sources.append((JS_CATEGORY, repo_dir / GENERATED_JS_DIR, ""))
    return sources


def consolidate(
    spec: RepoSpec,
    config: GlobalConfig,
    repo_dir: Path,
    output_dir: Path,
    selector: FileSelector,
    built: bool,
) -> Dict[str, int]:
    """Copy selected files of every applicable category and emit directives.

    Returns:
        number of copied files per category
    """
    copied: Dict[str, int] = {}
    for category, source_root, prefix in category_sources(spec, config, repo_dir, built):
        destination = category_output_dir(output_dir, category, spec.name)
        if prefix:
            destination = destination / prefix
        copied[category] = copy_tests(source_root, destination, selector)
        log_info(f"{spec.name}: copied {copied[category]} files into {category}/")

    if built and not spec.skip_js:
        write_directives(spec, config, output_dir)

    return copied

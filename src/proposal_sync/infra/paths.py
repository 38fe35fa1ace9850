# Path handling module: default locations and path resolution
#
# Main functions:
#   - resolve_path(): anchor relative paths on an explicit base directory
#   - repo_clone_dir(): location of one repository's clone
#   - category_output_dir(): tests/<category>/<repo> output location
#
# All paths are built from explicit base directories; the process working
# directory is only read once, when the CLI computes its defaults.

import re
from pathlib import Path
from typing import Optional, Union

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_LOCK_FILE = "config.lock"
DEFAULT_REPOS_DIR = "repos"
DEFAULT_OUTPUT_DIR = "tests"

# Output categories
WAST_CATEGORY = "wast"
WPT_CATEGORY = "wpt"
JS_CATEGORY = "js"

# Generated tree locations inside a clone
GENERATED_JS_DIR = "js"
GENERATED_WPT_DIR = "wpt"

STATUS_REPORT_NAME = "proposals"

PathLike = Union[str, Path]


def resolve_path(path: PathLike, base_dir: Optional[Path] = None) -> Path:
    """Resolve ``path`` against ``base_dir`` unless it is already absolute.

    Windows drive paths like ``C:\\...`` count as absolute on every platform.
    """
    candidate = Path(path)
    if candidate.is_absolute() or re.match(r"^[A-Za-z]:", str(candidate)):
        return candidate
    if base_dir is None:
        base_dir = Path.cwd()
    return base_dir / candidate


def repo_clone_dir(repos_dir: Path, repo_name: str) -> Path:
    return repos_dir / repo_name


def category_output_dir(output_dir: Path, category: str, repo_name: str) -> Path:
    return output_dir / category / repo_name

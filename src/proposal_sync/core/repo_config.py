"""Configuration file loading and validation."""

import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..domain.models import (
    DEFAULT_BUILD_SCRIPT,
    DEFAULT_DOCUMENT_DIR,
    DEFAULT_TEST_DIR,
    DEFAULT_TEST_EXTENSION,
    ConfigError,
    GlobalConfig,
    RepoSpec,
)
from ..domain.repo_graph import check_unique_names
from ..infra.logger import log_info

REPO_BOOL_KEYS = ("skip_merge", "skip_wast", "skip_wpt", "skip_js")
REPO_KEYS = {
    "name",
    "url",
    "parent",
    "commit",
    "directive",
    "included_tests",
    "excluded_tests",
    *REPO_BOOL_KEYS,
}
GLOBAL_KEYS = {
    "repos",
    "harness_directive",
    "directive",
    "included_tests",
    "excluded_tests",
    "build_script",
    "test_dir",
    "test_extension",
    "document_dir",
}


def _optional_str(table: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{where}.{key} must be a string")
    return value


def _str_with_default(table: Dict[str, Any], key: str, where: str, default: str) -> str:
    value = _optional_str(table, key, where)
    return default if value is None else value


def _str_list(table: Dict[str, Any], key: str, where: str) -> Tuple[str, ...]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{where}.{key} must be a list of strings")
    return tuple(value)


def _bool(table: Dict[str, Any], key: str, where: str) -> bool:
    value = table.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{where}.{key} must be true or false")
    return value


def _check_keys(table: Dict[str, Any], allowed, where: str) -> None:
    unknown = sorted(set(table) - set(allowed))
    if unknown:
        raise ConfigError(f"unknown keys in {where}: {', '.join(unknown)}")


def parse_repo_spec(table: Any, index: int) -> RepoSpec:
    where = f"repos[{index}]"
    if not isinstance(table, dict):
        raise ConfigError(f"{where} must be a table")
    _check_keys(table, REPO_KEYS, where)

    name = _optional_str(table, "name", where)
    url = _optional_str(table, "url", where)
    if not name:
        raise ConfigError(f"{where}.name is required")
    if not url:
        raise ConfigError(f"{where}.url is required")
    where = f"repos.{name}"

    return RepoSpec(
        name=name,
        url=url,
        parent=_optional_str(table, "parent", where),
        commit=_optional_str(table, "commit", where),
        directive=_optional_str(table, "directive", where),
        included_tests=_str_list(table, "included_tests", where),
        excluded_tests=_str_list(table, "excluded_tests", where),
        **{key: _bool(table, key, where) for key in REPO_BOOL_KEYS},
    )


def parse_config(data: Dict[str, Any]) -> GlobalConfig:
    """Build a GlobalConfig from decoded TOML data."""
    _check_keys(data, GLOBAL_KEYS, "config")

    raw_repos = data.get("repos", [])
    if not isinstance(raw_repos, list):
        raise ConfigError("repos must be an array of tables ([[repos]])")
    repos = tuple(parse_repo_spec(table, index) for index, table in enumerate(raw_repos))
    check_unique_names(repos)

    return GlobalConfig(
        repos=repos,
        harness_directive=_optional_str(data, "harness_directive", "config"),
        directive=_optional_str(data, "directive", "config"),
        included_tests=_str_list(data, "included_tests", "config"),
        excluded_tests=_str_list(data, "excluded_tests", "config"),
        build_script=_str_with_default(data, "build_script", "config", DEFAULT_BUILD_SCRIPT),
        test_dir=_str_with_default(data, "test_dir", "config", DEFAULT_TEST_DIR),
        test_extension=_str_with_default(data, "test_extension", "config", DEFAULT_TEST_EXTENSION),
        document_dir=_str_with_default(data, "document_dir", "config", DEFAULT_DOCUMENT_DIR),
    )


def load_config(config_path: Path) -> GlobalConfig:
    """Read and validate the configuration file.

    Raises:
        ConfigError: the file is missing, unreadable, not TOML or invalid
    """
    if not config_path.exists():
        raise ConfigError(f"config file not found: {config_path}")
    if not config_path.is_file():
        raise ConfigError(f"not a regular file: {config_path}")

    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"failed to read config file {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config file {config_path}: {exc}") from exc

    config = parse_config(data)
    log_info(f"loaded {len(config.repos)} repositories from {config_path}")
    return config

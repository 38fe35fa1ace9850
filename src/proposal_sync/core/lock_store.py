# Lock store module: pinned base commits for reproducible runs
#
# Main functions:
#   - LockStore.load(): read the lock file (absent file -> empty store)
#   - LockStore.record(): remember the base commit of a processed repository
#   - LockStore.save(): rewrite the whole lock file
#
# File format (TOML):
#   [commits]
#   "repo-name" = "abc1234"

import json
import tomllib
from pathlib import Path
from typing import Dict, List, Optional

from ..domain.models import ConfigError, LockEntry
from ..infra.logger import log_info

LOCK_HEADER = "# Generated by proposal-tests-sync. Base commit used for each repository."


def toml_string(value: str) -> str:
    """Quote ``value`` as a TOML basic string.

    Non-ASCII text stays literal since TOML has no surrogate escapes. JSON
    passes DEL through unescaped, so it is escaped here.
    """
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


class LockStore:
    """Mapping from repository name to the last base commit it was built from."""

    def __init__(self, commits: Optional[Dict[str, str]] = None):
        self._commits: Dict[str, str] = dict(commits or {})

    @classmethod
    def load(cls, path: Path) -> "LockStore":
        if not path.exists():
            log_info(f"no lock file at {path}, starting unpinned")
            return cls()

        try:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid lock file {path}: {exc}") from exc

        commits = data.get("commits", {})
        if not isinstance(commits, dict):
            raise ConfigError(f"invalid lock file {path}: [commits] must be a table")

        for name, commit in commits.items():
            if not isinstance(commit, str) or not commit:
                raise ConfigError(f"invalid lock file {path}: commit for {name} must be a string")

        return cls(commits)

    def get(self, name: str) -> Optional[str]:
        return self._commits.get(name)

    def record(self, name: str, commit: str) -> None:
        self._commits[name] = commit

    def entries(self) -> List[LockEntry]:
        return [LockEntry(name, self._commits[name]) for name in sorted(self._commits)]

    def __len__(self) -> int:
        return len(self._commits)

    def render(self) -> str:
        lines = [LOCK_HEADER, "", "[commits]"]
        for entry in self.entries():
            lines.append(f"{toml_string(entry.name)} = {toml_string(entry.commit)}")
        return "\n".join(lines) + "\n"

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")
        log_info(f"lock file written: {path} ({len(self)} repositories)")

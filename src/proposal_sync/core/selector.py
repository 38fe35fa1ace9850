"""Include/exclude pattern sets deciding which test files are copied."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Pattern, Tuple

from ..domain.models import ChangeSet, ConfigError, GlobalConfig, RepoSpec

HARNESS_PATTERN = "harness/"


def compile_patterns(patterns: Iterable[str], source: str) -> Tuple[Pattern, ...]:
    """Compile regex patterns, naming the config entry that holds a bad one."""
    compiled: List[Pattern] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f"invalid pattern {pattern!r} in {source}: {exc}") from exc
    return tuple(compiled)


@dataclass(frozen=True)
class FileSelector:
    """A path is selected iff some include matches and no exclude does.

    Matching is an unanchored ``re.search`` on the POSIX relative path inside
    the category tree being copied.
    """

    include: Tuple[Pattern, ...]
    exclude: Tuple[Pattern, ...]

    @classmethod
    def build(cls, spec: RepoSpec, config: GlobalConfig, changes: ChangeSet) -> "FileSelector":
        # Detected names are file names, not patterns
        include = compile_patterns(
            [re.escape(name) for name in sorted(changes.names)] + [HARNESS_PATTERN],
            "detected changes",
        )
        include += compile_patterns(spec.included_tests, f"repos.{spec.name}.included_tests")
        include += compile_patterns(config.included_tests, "included_tests")

        exclude = compile_patterns(config.excluded_tests, "excluded_tests")
        exclude += compile_patterns(spec.excluded_tests, f"repos.{spec.name}.excluded_tests")
        return cls(include=include, exclude=exclude)

    def is_selected(self, path: str) -> bool:
        if not any(pattern.search(path) for pattern in self.include):
            return False
        return not any(pattern.search(path) for pattern in self.exclude)

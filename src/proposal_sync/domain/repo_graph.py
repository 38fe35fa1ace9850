"""Parent/child ordering of proposal repositories."""

from typing import Dict, List, Sequence

from .models import ConfigError, RepoSpec


def check_unique_names(repos: Sequence[RepoSpec]) -> None:
    """Reject configurations that declare the same repository twice."""
    seen = set()
    for repo in repos:
        if repo.name in seen:
            raise ConfigError(f"duplicate repository name: {repo.name}")
        seen.add(repo.name)


def topological_order(repos: Sequence[RepoSpec]) -> List[RepoSpec]:
    """Order repositories so every parent comes before its children.

    Configuration order is kept wherever the parent links allow it.

    Raises:
        ConfigError: a parent name is not declared, or the links form a cycle.
    """
    check_unique_names(repos)
    by_name: Dict[str, RepoSpec] = {repo.name: repo for repo in repos}

    for repo in repos:
        if repo.parent is None:
            continue
        if repo.parent == repo.name:
            raise ConfigError(f"repository {repo.name} lists itself as parent")
        if repo.parent not in by_name:
            raise ConfigError(
                f"repository {repo.name} references unknown parent {repo.parent}"
            )

    ordered: List[RepoSpec] = []
    # 0 = unvisited, 1 = on the current path, 2 = done
    state: Dict[str, int] = {repo.name: 0 for repo in repos}

    def visit(repo: RepoSpec, path: List[str]) -> None:
        if state[repo.name] == 2:
            return
        if state[repo.name] == 1:
            cycle = " -> ".join(path[path.index(repo.name):] + [repo.name])
            raise ConfigError(f"parent cycle between repositories: {cycle}")

        state[repo.name] = 1
        if repo.parent is not None:
            visit(by_name[repo.parent], path + [repo.name])
        state[repo.name] = 2
        ordered.append(repo)

    for repo in repos:
        visit(repo, [])

    return ordered


def descendants_of(repos: Sequence[RepoSpec], name: str) -> List[str]:
    """Names of every repository layered (directly or not) on ``name``."""
    children: Dict[str, List[str]] = {}
    for repo in repos:
        if repo.parent is not None:
            children.setdefault(repo.parent, []).append(repo.name)

    found: List[str] = []
    pending = list(children.get(name, []))
    while pending:
        child = pending.pop(0)
        if child in found:
            continue
        found.append(child)
        pending.extend(children.get(child, []))
    return found

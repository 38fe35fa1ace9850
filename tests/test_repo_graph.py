import pytest

from proposal_sync.domain.models import ConfigError, RepoSpec
from proposal_sync.domain.repo_graph import descendants_of, topological_order


def _repo(name, parent=None):
    return RepoSpec(name=name, url=f"https://example.com/{name}.git", parent=parent)


def test_configuration_order_is_kept_when_valid():
    repos = [_repo("upstream"), _repo("a", "upstream"), _repo("b")]

    assert [repo.name for repo in topological_order(repos)] == ["upstream", "a", "b"]


def test_parent_listed_after_child_is_moved_first():
    repos = [_repo("child", "parent"), _repo("grandchild", "child"), _repo("parent")]

    assert [repo.name for repo in topological_order(repos)] == ["parent", "child", "grandchild"]


def test_unknown_parent_is_a_config_error():
    with pytest.raises(ConfigError, match="unknown parent missing"):
        topological_order([_repo("a", "missing")])


def test_cycle_is_a_config_error():
    with pytest.raises(ConfigError, match="cycle"):
        topological_order([_repo("a", "b"), _repo("b", "a")])


def test_self_parent_is_a_config_error():
    with pytest.raises(ConfigError, match="itself"):
        topological_order([_repo("a", "a")])


def test_duplicate_names_are_rejected():
    with pytest.raises(ConfigError, match="duplicate"):
        topological_order([_repo("a"), _repo("a")])


def test_descendants_are_transitive():
    repos = [_repo("root"), _repo("a", "root"), _repo("b", "a"), _repo("c")]

    assert descendants_of(repos, "root") == ["a", "b"]
    assert descendants_of(repos, "c") == []

from conftest import commit_files, requires_git, run_git

from proposal_sync.core.merge import merge_parent
from proposal_sync.core.sync import sync_repo
from proposal_sync.domain.models import GlobalConfig, MergeOutcome, RepoSpec

pytestmark = requires_git


def _setup(tmp_path, make_upstream, fork_upstream, child_changes, parent_changes):
    parent = make_upstream(
        "A",
        {
            "document/index.md": "A doc\n",
            "test/core/foo.wast": "(module $foo)\n",
        },
    )
    child = fork_upstream(parent, "B")
    commit_files(child, child_changes, message="child change")
    commit_files(parent, parent_changes, message="parent change")

    spec_a = RepoSpec(name="A", url=parent.as_posix())
    spec_b = RepoSpec(name="B", url=child.as_posix(), parent="A")
    config = GlobalConfig(repos=(spec_a, spec_b))
    synced = sync_repo(spec_b, config, tmp_path / "repos")
    return spec_b, synced


def _tree_state(repo_dir):
    return (
        run_git(repo_dir, "rev-parse", "HEAD").strip(),
        run_git(repo_dir, "status", "--porcelain"),
    )


def test_document_only_conflict_keeps_local_document(tmp_path, make_upstream, fork_upstream):
    spec, synced = _setup(
        tmp_path,
        make_upstream,
        fork_upstream,
        child_changes={"document/index.md": "B doc\n"},
        parent_changes={"document/index.md": "A doc v2\n", "test/core/new.wast": "(module $new)\n"},
    )
    repo_dir = tmp_path / "repos" / "B"

    outcome = merge_parent(spec, repo_dir, synced.commit_base_hash)

    assert outcome is MergeOutcome.MERGED
    assert (repo_dir / "document" / "index.md").read_text() == "B doc\n"
    assert (repo_dir / "test" / "core" / "new.wast").read_text() == "(module $new)\n"
    assert run_git(repo_dir, "status", "--porcelain") == ""


def test_clean_merge_has_no_override(tmp_path, make_upstream, fork_upstream):
    spec, synced = _setup(
        tmp_path,
        make_upstream,
        fork_upstream,
        child_changes={"test/core/child.wast": "(module $child)\n"},
        parent_changes={"test/core/new.wast": "(module $new)\n"},
    )
    repo_dir = tmp_path / "repos" / "B"

    outcome = merge_parent(spec, repo_dir, synced.commit_base_hash)

    assert outcome is MergeOutcome.MERGED
    assert (repo_dir / "test" / "core" / "child.wast").exists()
    assert (repo_dir / "test" / "core" / "new.wast").exists()
    assert (repo_dir / "document" / "index.md").read_text() == "A doc\n"


def test_test_conflict_leaves_working_copy_at_base(tmp_path, make_upstream, fork_upstream):
    spec, synced = _setup(
        tmp_path,
        make_upstream,
        fork_upstream,
        child_changes={"test/core/foo.wast": "(module $foo_child)\n"},
        parent_changes={"test/core/foo.wast": "(module $foo_parent)\n"},
    )
    repo_dir = tmp_path / "repos" / "B"
    base_head, base_status = _tree_state(repo_dir)

    outcome = merge_parent(spec, repo_dir, synced.commit_base_hash)

    assert outcome is MergeOutcome.CONFLICTED
    assert _tree_state(repo_dir) == (base_head, base_status)
    assert (repo_dir / "test" / "core" / "foo.wast").read_text() == "(module $foo_child)\n"
    assert not (repo_dir / ".git" / "MERGE_HEAD").exists()

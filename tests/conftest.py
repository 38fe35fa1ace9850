from pathlib import Path
import shutil
import subprocess
import sys
import textwrap

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from proposal_sync.core.process_control import CommandError  # noqa: E402


class FakeRunner:
    """Stand-in for run_command that records calls instead of spawning.

    ``failures`` holds command prefixes that fail once each (listed twice to
    fail twice); ``broken`` prefixes fail every time. ``outputs`` maps a
    prefix to the stdout returned for it.
    """

    def __init__(self):
        self.calls = []
        self.failures = []
        self.broken = []
        self.outputs = {}

    @staticmethod
    def _matches(command, prefix):
        return tuple(command[: len(prefix)]) == tuple(prefix)

    def __call__(self, command, cwd):
        command = tuple(str(part) for part in command)
        self.calls.append((command, Path(cwd)))

        for prefix in self.broken:
            if self._matches(command, prefix):
                raise CommandError(" ".join(command), 1, "", "broken")
        for prefix in list(self.failures):
            if self._matches(command, prefix):
                self.failures.remove(prefix)
                raise CommandError(" ".join(command), 1, "", "failed")
        for prefix, output in self.outputs.items():
            if self._matches(command, prefix):
                return output
        return ""

    def git_calls(self):
        return [command[1:] for command, _ in self.calls if command[0] == "git"]

    def count(self, prefix):
        return sum(1 for command, _ in self.calls if self._matches(command, prefix))


@pytest.fixture
def fake_runner(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr("proposal_sync.core.git.run_command", runner)
    monkeypatch.setattr("proposal_sync.core.build.run_command", runner)
    return runner


# ---------------------------------------------------------------------------
# Real git helpers for end-to-end tests

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

STAND_IN_BUILD_SCRIPT = textwrap.dedent(
    """\
    import sys
    from pathlib import Path

    args = sys.argv[1:]
    js_dir = Path(args[args.index("--js") + 1])
    wpt_dir = Path(args[args.index("--html") + 1])

    if Path("BROKEN").exists():
        sys.exit("build is broken")

    for wast in sorted(Path("test/core").rglob("*.wast")):
        for out_dir, suffix in ((js_dir, ".js"), (wpt_dir, ".html")):
            target = out_dir / (wast.name + suffix)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(wast.read_text())

    harness = js_dir / "harness"
    harness.mkdir(parents=True, exist_ok=True)
    (harness / "sync_index.js").write_text("// harness")
    """
)


def run_git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=str(repo),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        check=True,
    )
    return result.stdout


def write_files(repo: Path, files) -> None:
    for relative, content in files.items():
        path = repo / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def commit_files(repo: Path, files, message: str = "update") -> str:
    write_files(repo, files)
    run_git(repo, "add", "-A")
    run_git(repo, "commit", "-q", "-m", message)
    return run_git(repo, "log", "--pretty=%h", "-n", "1").strip()


def remove_files(repo: Path, *relative_paths: str, message: str = "remove") -> None:
    run_git(repo, "rm", "-q", *relative_paths)
    run_git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def git_env(monkeypatch, tmp_path):
    """Isolate git from the user's configuration and give it an identity."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    return home


@pytest.fixture
def make_upstream(tmp_path, git_env):
    """Create an upstream repository with the stand-in build script."""

    def _make(name, files):
        repo = tmp_path / "upstream" / name
        repo.mkdir(parents=True)
        run_git(repo, "init", "-q")
        all_files = {"test/build.py": STAND_IN_BUILD_SCRIPT}
        all_files.update(files)
        commit_files(repo, all_files, message=f"initial {name}")
        return repo

    return _make


@pytest.fixture
def fork_upstream(tmp_path, git_env):
    """Clone an upstream repository into a new upstream (a child proposal)."""

    def _fork(source: Path, name: str):
        repo = tmp_path / "upstream" / name
        run_git(source.parent, "clone", "-q", str(source), str(repo))
        return repo

    return _fork

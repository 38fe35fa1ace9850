from pathlib import Path

from proposal_sync import cli


def test_parse_args_defaults():
    args = cli.parse_args([])

    assert args.config == "config.toml"
    assert args.lock == "config.lock"
    assert args.repos_dir == "repos"
    assert args.output_dir == "tests"
    assert args.update is False
    assert args.keep_going is False


def test_main_passes_resolved_paths(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    received = {}

    def fake_run(**kwargs):
        received.update(kwargs)
        return True, {"total": 1, "success": 1, "fail": 0, "lock_file": "config.lock"}, ""

    monkeypatch.setattr(cli, "run_consolidation", fake_run)

    assert cli.main(["-u", "-k", "--output-dir", "/abs/out"]) == cli.EXIT_OK
    assert received["config_file"] == tmp_path / "config.toml"
    assert received["repos_dir"] == tmp_path / "repos"
    assert received["output_dir"] == Path("/abs/out")
    assert received["update"] is True
    assert received["keep_going"] is True


def test_main_reports_failures_with_non_zero_exit(monkeypatch, capsys):
    monkeypatch.setattr(
        cli,
        "run_consolidation",
        lambda **kwargs: (False, {"total": 2, "success": 1, "fail": 1, "failures": {"b": "boom"}}, ""),
    )

    assert cli.main([]) == cli.EXIT_FAILURE
    assert "b: boom" in capsys.readouterr().err


def test_main_config_error_exits_with_failure(monkeypatch):
    monkeypatch.setattr(cli, "run_consolidation", lambda **kwargs: (False, {}, "config file not found"))

    assert cli.main([]) == cli.EXIT_FAILURE


def test_interrupt_terminates_tracked_processes(monkeypatch):
    terminated = []

    def interrupted(**kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "run_consolidation", interrupted)
    monkeypatch.setattr(cli, "terminate_all_tracked_processes", lambda: terminated.append(True))

    assert cli.main([]) == cli.EXIT_INTERRUPTED
    assert terminated == [True]


def test_summary_lists_copied_counts_per_repository(monkeypatch, capsys):
    result = {
        "total": 1,
        "success": 1,
        "fail": 0,
        "copied": {"simd": {"wast": 3, "js": 4}},
        "changed": {"simd": ["a.wast", "b.wast", "c.wast"]},
    }
    monkeypatch.setattr(cli, "run_consolidation", lambda **kwargs: (True, result, ""))

    assert cli.main([]) == cli.EXIT_OK
    assert "simd: copied wast 3, js 4 (3 changed tests)" in capsys.readouterr().out

from __future__ import annotations

import json
import runpy
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]


def test_cli_simulate_prints_status_lines(
    examples_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    from schedlab.cli import main

    rc = main(["simulate", str(examples_dir / "caso001.txt")])
    assert rc == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "== caso001.txt",
        "processors: 2",
        "tasks: 4",
        "makespan MIN: 8",
        "makespan MAX: 8",
    ]


def test_cli_simulate_directory_writes_summary_runs_and_trace(
    examples_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    from schedlab.cli import main

    out_summary = tmp_path / "summary.json"
    out_runs = tmp_path / "runs.csv"
    out_trace = tmp_path / "trace.csv"

    rc = main(
        [
            "simulate",
            str(examples_dir),
            "--parallel",
            "--out-summary",
            str(out_summary),
            "--out-runs",
            str(out_runs),
            "--out-trace",
            str(out_trace),
        ]
    )
    assert rc == 0
    assert "makespan MAX: 2 (stalled)" in capsys.readouterr().out

    summary = json.loads(out_summary.read_text(encoding="utf-8"))
    assert summary["cases_ok"] == 4
    assert summary["runs_stalled"] == 2
    assert out_runs.read_text(encoding="utf-8").count("\n") == 1 + 8
    assert "caso003.txt,min,release" in out_trace.read_text(encoding="utf-8")


def test_cli_single_policy_and_failed_case(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    from schedlab.cli import main

    (tmp_path / "caso001.txt").write_text("# Proc 2\nA_1\n", encoding="utf-8")
    (tmp_path / "caso002.txt").write_text("A_1\n", encoding="utf-8")

    rc = main(["simulate", str(tmp_path), "--policy", "max", "--log-level", "ERROR"])
    assert rc == 1

    captured = capsys.readouterr()
    assert "makespan MAX: 1" in captured.out
    assert "makespan MIN" not in captured.out
    assert "== caso002.txt\nfailed: caso002.txt: processor declaration" in captured.out
    assert "processor declaration" in captured.err


def test_cli_strict_mode_fails_on_malformed_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    from schedlab.cli import main

    p = tmp_path / "c.txt"
    p.write_text("# Proc 2\nA_1\nbroken\n", encoding="utf-8")
    assert main(["simulate", str(p)]) == 0
    assert main(["simulate", str(p), "--strict"]) == 1
    assert "c.txt:3:" in capsys.readouterr().out


def test_cli_no_inputs_found(tmp_path: Path) -> None:
    from schedlab.cli import main

    assert main(["simulate", str(tmp_path)]) == 2


def test_cli_unhandled_command_raises_assertion(monkeypatch: pytest.MonkeyPatch) -> None:
    import schedlab.cli

    class _DummyParser:
        def parse_args(self, _argv: list[str] | None) -> object:
            return SimpleNamespace(cmd="nope")

    monkeypatch.setattr(schedlab.cli, "_build_parser", lambda: _DummyParser())
    with pytest.raises(AssertionError, match="Unhandled command"):
        schedlab.cli.main(["anything"])


def test_python_m_schedlab_executes_main(examples_dir: Path) -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "schedlab", "simulate", str(examples_dir / "caso002.txt")],
        capture_output=True,
        text=True,
        check=False,
        cwd=str(ROOT),
    )
    assert proc.returncode == 0, proc.stderr
    assert "makespan MIN: 6" in proc.stdout
    assert "makespan MAX: 5" in proc.stdout


def test___main___module_runs_inprocess_and_exits_zero(examples_dir: Path) -> None:
    old_argv = sys.argv[:]
    try:
        sys.argv = ["python -m schedlab", "simulate", str(examples_dir / "caso001.txt")]
        with pytest.raises(SystemExit) as exc:
            runpy.run_module("schedlab.__main__", run_name="__main__")
        assert exc.value.code == 0
    finally:
        sys.argv = old_argv


def test_runner_forwards_directory_and_options(
    examples_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import schedlab.cli

    captured = {}

    def fake_cli_main(argv: list[str]) -> int:
        captured["argv"] = argv
        return 0

    monkeypatch.setattr(schedlab.cli, "main", fake_cli_main)
    monkeypatch.setattr(sys, "argv", ["runner.py", str(examples_dir), "--parallel"])

    import runner

    assert runner.main() == 0
    assert captured["argv"] == ["simulate", str(examples_dir), "--parallel"]

    monkeypatch.setattr(sys, "argv", ["runner.py", "--strict"])
    assert runner.main() == 0
    assert captured["argv"] == ["simulate", ".", "--strict"]


def test_runner_scans_current_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "caso001.txt").write_text("# Proc 1\nA_2 -> B_3\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["runner.py"])

    import runner

    assert runner.main() == 0
    assert "makespan MIN: 5" in capsys.readouterr().out

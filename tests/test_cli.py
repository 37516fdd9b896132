from pathlib import Path

from schedsim.cli import main
from schedsim.workload_io import load_workload


def _answers(monkeypatch, *values):
    it = iter(values)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(it))


def test_run_generated(capsys):
    assert main(["run", "-a", "fcfs", "-n", "4", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "FCFS" in out
    assert "Average waiting time" in out


def test_run_round_robin_prints_log(tmp_path: Path, capsys):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,4,1\n2,0,4,2\n")
    assert main(["run", "-a", "rr", "-w", str(p), "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert "t=0 .. 2 | P1 ran for 2, remaining = 2" in out


def test_run_missing_workload(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "nope.json")]) == 1
    assert "Error" in capsys.readouterr().out


def test_run_unknown_algorithm(capsys):
    assert main(["run", "-a", "lottery", "-n", "3"]) == 1
    assert "Unknown algorithm" in capsys.readouterr().out


def test_compare(capsys):
    assert main(["compare", "-n", "5", "--seed", "2"]) == 0
    out = capsys.readouterr().out
    for name in ["FCFS", "Round Robin", "Priority", "Dynamic Priority", "SJF"]:
        assert name in out


def test_generate(tmp_path: Path):
    out = tmp_path / "w.json"
    assert main(["generate", "-n", "6", "--seed", "9", "-o", str(out)]) == 0
    assert len(load_workload(out)) == 6


def test_menu_session(monkeypatch, capsys):
    _answers(monkeypatch, "1", "2", "3", "4", "6", "9", "0")
    assert main(["menu", "-n", "3", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Invalid choice." in out
    assert "Time quantum: 3" in out


def test_menu_non_numeric_ends_session(monkeypatch, capsys):
    _answers(monkeypatch, "abc")
    assert main(["menu", "-n", "3"]) == 0
    assert "Input error. Exiting." in capsys.readouterr().out


def test_menu_prompts_for_count(monkeypatch, capsys):
    _answers(monkeypatch, "0")
    assert main(["menu"]) == 0
    assert "Invalid number." in capsys.readouterr().out


def test_loaded_workload_title(tmp_path: Path, capsys):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,2,1\n")
    assert main(["compare", "-w", str(p)]) == 0
    out = capsys.readouterr().out
    assert "Generated processes" not in out
    assert "Processes from" in out


def test_generated_title(capsys):
    assert main(["run", "-a", "sjf", "-n", "2", "--seed", "4"]) == 0
    assert "Generated processes" in capsys.readouterr().out

from pathlib import Path

import pytest

from schedsim.models import Process
from schedsim.workload_io import load_workload, save_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3,"priority":2},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 2
    assert procs[1].priority == 1
    assert procs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,3,4\n2,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[0].priority == 4
    assert procs[1].priority == 1


def test_save_then_load_csv(tmp_path: Path):
    procs = [Process(1, 0, 3, 2), Process(2, 4, 1, 5)]
    p = tmp_path / "w.csv"
    save_workload(p, procs)
    assert load_workload(p) == procs


def test_duplicate_pid_rejected(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,3\n1,2,2\n")
    with pytest.raises(ValueError, match="Duplicate pid"):
        load_workload(p)


def test_malformed_entry_rejected(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":"soon","burst_time":3}]')
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_out_of_range_rejected(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":0}]')
    with pytest.raises(ValueError, match="burst_time"):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    with pytest.raises(ValueError, match="Unsupported workload format"):
        load_workload(tmp_path / "w.yaml")


@pytest.mark.parametrize(
    "entry",
    [
        '{"pid":1,"arrival_time":2.9,"burst_time":3}',
        '{"pid":1,"arrival_time":0,"burst_time":true}',
        '{"pid":1,"arrival_time":0,"burst_time":3,"priority":1.5}',
    ],
)
def test_non_integer_values_rejected(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_integral_float_accepted(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":2.0,"burst_time":3}]')
    assert load_workload(p) == [Process(1, 2, 3, 1)]


def test_csv_decimal_rejected(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,2.9,3\n")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)

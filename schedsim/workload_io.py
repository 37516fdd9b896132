from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from .models import Process

FIELDS = ["pid", "arrival_time", "burst_time", "priority"]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    _check_unique_pids(processes)
    return processes


def save_workload(path: str | Path, processes: List[Process]) -> None:
    """
    Write processes to a JSON or CSV file, chosen by suffix.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    rows = [{name: getattr(p, name) for name in FIELDS} for p in processes]

    if suffix == ".json":
        with path.open("w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
            f.write("\n")
    elif suffix == ".csv":
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDS)
            writer.writeheader()
            writer.writerows(rows)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        pid = _to_int(mapping["pid"])
        arrival_time = _to_int(mapping["arrival_time"])
        burst_time = _to_int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = _to_int(priority_val) if priority_val not in (None, "") else 1
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    # Range checks happen in Process itself and also raise ValueError.
    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _to_int(value) -> int:
    """
    Convert a JSON/CSV field to int without truncating: 2.9 and true are rejected.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, float):
        if value != int(value):
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    return int(value)


def _check_unique_pids(processes: List[Process]) -> None:
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise ValueError(f"Duplicate pid in workload: {p.pid}")
        seen.add(p.pid)

from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice


def merge_slices(slices: List[ScheduledSlice]) -> List[ScheduledSlice]:
    """
    Join back-to-back slices of the same process into one bar.

    Dynamic priority logs one slice per time unit; this keeps the chart
    readable.
    """
    merged: List[ScheduledSlice] = []
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        last = merged[-1] if merged else None
        if last is not None and last.pid == sl.pid and last.end_time == sl.start_time:
            merged[-1] = ScheduledSlice(
                pid=last.pid,
                start_time=last.start_time,
                end_time=sl.end_time,
                remaining=sl.remaining,
                priority=sl.priority,
            )
        else:
            merged.append(sl)
    return merged


def slice_label(pid: int, width: int) -> str:
    """
    Label for a bar of the given width; drops the "P" prefix when it does not fit.
    """
    label = f"P{pid}"
    if len(label) > width:
        label = str(pid)
    return label[:width].ljust(width)


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = merge_slices(slices)

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for sl in slices:
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
            last_time = sl.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, sl.run_time)
        color = pid_color(sl.pid)

        timeline.append(" " * width, style=f"on {color}")
        labels.append(slice_label(sl.pid, width), style="bold")

        last_time = sl.end_time
        time_marks += f"{last_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks

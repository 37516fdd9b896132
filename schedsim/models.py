from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    """
    Immutable process descriptor. Lower priority value means higher priority.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 1

    def __post_init__(self) -> None:
        if self.pid < 1:
            raise ValueError(f"pid must be a positive integer, got {self.pid}")
        if self.arrival_time < 0:
            raise ValueError(f"P{self.pid}: arrival_time must be >= 0, got {self.arrival_time}")
        if self.burst_time < 1:
            raise ValueError(f"P{self.pid}: burst_time must be >= 1, got {self.burst_time}")
        if self.priority < 1:
            raise ValueError(f"P{self.pid}: priority must be >= 1, got {self.priority}")


@dataclass
class ProcessState:
    """
    Working copy of a process for a single simulation run.

    start_time and finish_time stay at -1 until the process is first
    dispatched / completed.
    """

    pid: int
    arrival_time: int
    burst_time: int
    initial_priority: int
    priority: int
    remaining_time: int
    start_time: int = -1
    finish_time: int = -1
    waiting_time: int = 0
    turnaround_time: int = 0

    @classmethod
    def from_process(cls, process: Process) -> "ProcessState":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            initial_priority=process.priority,
            priority=process.priority,
            remaining_time=process.burst_time,
        )

    @property
    def started(self) -> bool:
        return self.start_time != -1

    @property
    def finished(self) -> bool:
        return self.finish_time != -1

    def complete(self, finish_time: int) -> None:
        self.remaining_time = 0
        self.finish_time = finish_time
        self.turnaround_time = finish_time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process.

    remaining is the burst time left after the slice; priority is only
    recorded by the dynamic priority scheduler.
    """

    pid: int
    start_time: int
    end_time: int
    remaining: int = 0
    priority: Optional[int] = None

    @property
    def run_time(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ResultSummary:
    name: str
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    starvation_count: int = 0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int] = None
    processes: List[ProcessState] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    summary: Optional[ResultSummary] = None
    system: Optional[SystemMetrics] = None

    @property
    def avg_waiting(self) -> float:
        return self.summary.avg_waiting if self.summary else 0.0

    @property
    def avg_turnaround(self) -> float:
        return self.summary.avg_turnaround if self.summary else 0.0

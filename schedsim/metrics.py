from __future__ import annotations

from typing import List

from .models import ProcessState, ResultSummary, ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process state
    and the execution timeline.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.finish_time for p in result.processes)
    cpu_busy_time = sum(slice_.run_time for slice_ in result.timeline)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # Processes that waited more than twice the average count as starved.
    avg_wait = sum(p.waiting_time for p in result.processes) / len(result.processes)
    starvation_count = sum(1 for p in result.processes if p.waiting_time > 2 * avg_wait)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        starvation_count=starvation_count,
    )
    result.system = system
    return system


def summarize_process_metrics(name: str, processes: List[ProcessState]) -> ResultSummary:
    """
    Return the average waiting and turnaround time over all processes.
    """
    if not processes:
        return ResultSummary(name=name)

    n = len(processes)
    return ResultSummary(
        name=name,
        avg_waiting=sum(p.waiting_time for p in processes) / n,
        avg_turnaround=sum(p.turnaround_time for p in processes) / n,
    )

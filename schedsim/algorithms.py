from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional

from .metrics import compute_system_metrics, summarize_process_metrics
from .models import Process, ProcessState, ScheduleResult, ScheduledSlice

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def _fresh_states(processes: List[Process]) -> List[ProcessState]:
    # Every run gets its own state so engines never see each other's mutations.
    return [ProcessState.from_process(p) for p in processes]


def _build_result(
    algorithm: str,
    states: List[ProcessState],
    timeline: List[ScheduledSlice],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=states,
        timeline=timeline,
        summary=summarize_process_metrics(algorithm, states),
    )
    compute_system_metrics(result)
    return result


def _no_processes(algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
    logger.info("%s: no processes", algorithm)
    return _build_result(algorithm, [], [], quantum=quantum)


def _earliest_unfinished(states: List[ProcessState], done: List[bool]) -> Optional[int]:
    """
    Index of the unfinished process with the smallest arrival time, or None.
    The first array position wins on ties.
    """
    best: Optional[int] = None
    for i, s in enumerate(states):
        if done[i]:
            continue
        if best is None or s.arrival_time < states[best].arrival_time:
            best = i
    return best


def simulate_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Served (non-preemptive) scheduling.

    Processes run in (arrival_time, pid) order; the CPU idles until the next
    arrival when it runs dry.
    """
    name = "FCFS"
    if not processes:
        return _no_processes(name)

    states = sorted(_fresh_states(processes), key=lambda s: (s.arrival_time, s.pid))

    time = 0
    timeline: List[ScheduledSlice] = []

    for s in states:
        if time < s.arrival_time:
            logger.debug("%s: idle %d..%d", name, time, s.arrival_time)
            time = s.arrival_time

        s.start_time = time
        s.complete(s.start_time + s.burst_time)
        timeline.append(ScheduledSlice(pid=s.pid, start_time=s.start_time, end_time=s.finish_time))

        time = s.finish_time

    return _build_result(name, states, timeline)


def simulate_round_robin(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running are admitted to the ready
    queue only once the slice ends, ahead of the process that was just
    preempted.
    """
    name = "Round Robin"
    if not processes:
        return _no_processes(name, quantum=quantum)

    if quantum is None or quantum <= 0:
        logger.warning("%s: invalid quantum %r, nothing simulated", name, quantum)
        return _build_result(name, [], [], quantum=quantum)

    states = _fresh_states(processes)
    n = len(states)

    ready: Deque[int] = deque()
    in_queue = [False] * n
    finished = [False] * n
    completed = 0
    timeline: List[ScheduledSlice] = []

    def enqueue(idx: int) -> None:
        ready.append(idx)
        in_queue[idx] = True

    def admit_arrivals(current_time: int) -> None:
        for i, s in enumerate(states):
            if not finished[i] and not in_queue[i] and s.arrival_time <= current_time:
                enqueue(i)

    first = _earliest_unfinished(states, finished)
    time = states[first].arrival_time
    enqueue(first)

    while completed < n:
        if not ready:
            nxt = _earliest_unfinished(states, finished)
            if nxt is None:
                break
            logger.debug("%s: ready queue empty, jumping %d -> %d", name, time, states[nxt].arrival_time)
            time = states[nxt].arrival_time
            enqueue(nxt)

        # The running process keeps its queue flag until it is requeued or
        # finishes, so the admission scan below does not pick it up.
        idx = ready.popleft()
        s = states[idx]

        if not s.started:
            s.start_time = time

        run_time = min(quantum, s.remaining_time)
        slice_start = time
        time += run_time
        s.remaining_time -= run_time
        timeline.append(
            ScheduledSlice(pid=s.pid, start_time=slice_start, end_time=time, remaining=s.remaining_time)
        )
        logger.debug("%s: t=%d..%d P%d ran %d, remaining %d", name, slice_start, time, s.pid, run_time, s.remaining_time)

        admit_arrivals(time)

        if s.remaining_time == 0:
            finished[idx] = True
            in_queue[idx] = False
            s.complete(time)
            completed += 1
        else:
            ready.append(idx)

    return _build_result(name, states, timeline, quantum=quantum)


def simulate_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes the first one in input order with the smallest priority wins.
    """
    name = "Priority"
    if not processes:
        return _no_processes(name)

    states = _fresh_states(processes)
    n = len(states)
    done = [False] * n
    completed = 0

    time = 0
    timeline: List[ScheduledSlice] = []

    while completed < n:
        ready = [i for i, s in enumerate(states) if not done[i] and s.arrival_time <= time]

        if not ready:
            nxt = _earliest_unfinished(states, done)
            if nxt is None:
                break
            logger.debug("%s: idle %d..%d", name, time, states[nxt].arrival_time)
            time = states[nxt].arrival_time
            continue

        # min() keeps the first of equal keys, so ties go to input order.
        best = min(ready, key=lambda i: states[i].priority)
        s = states[best]

        s.start_time = time
        s.complete(time + s.burst_time)
        timeline.append(ScheduledSlice(pid=s.pid, start_time=s.start_time, end_time=s.finish_time))
        logger.debug("%s: dispatch P%d (prio=%d) at t=%d", name, s.pid, s.priority, time)

        done[best] = True
        completed += 1
        time = s.finish_time

    return _build_result(name, states, timeline)


def simulate_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time; ties go to the
    smallest pid.
    """
    name = "SJF"
    if not processes:
        return _no_processes(name)

    states = _fresh_states(processes)
    n = len(states)
    done = [False] * n
    completed = 0

    time = min(s.arrival_time for s in states)
    timeline: List[ScheduledSlice] = []

    while completed < n:
        ready = [i for i, s in enumerate(states) if not done[i] and s.arrival_time <= time]

        if not ready:
            nxt = _earliest_unfinished(states, done)
            if nxt is None:
                break
            logger.debug("%s: idle %d..%d", name, time, states[nxt].arrival_time)
            time = states[nxt].arrival_time
            continue

        best = min(ready, key=lambda i: (states[i].burst_time, states[i].pid))
        s = states[best]

        s.start_time = time
        s.complete(time + s.burst_time)
        timeline.append(ScheduledSlice(pid=s.pid, start_time=s.start_time, end_time=s.finish_time))
        logger.debug("%s: dispatch P%d (burst=%d) at t=%d", name, s.pid, s.burst_time, time)

        done[best] = True
        completed += 1
        time = s.finish_time

    return _build_result(name, states, timeline)


def simulate_dynamic_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Preemptive priority scheduling with aging, stepped one time unit at a time.

    After every step each other arrived, unfinished process gains one level
    of priority (down to 1). Arrival for aging is checked against the clock
    after the step, so a process arriving exactly at the end of the step is
    aged as well.
    """
    name = "Dynamic Priority"
    if not processes:
        return _no_processes(name)

    states = _fresh_states(processes)
    n = len(states)
    finished = [False] * n
    completed = 0

    time = min(s.arrival_time for s in states)
    timeline: List[ScheduledSlice] = []

    while completed < n:
        best: Optional[int] = None
        for i, s in enumerate(states):
            if finished[i] or s.arrival_time > time or s.remaining_time <= 0:
                continue
            if best is None or s.priority < states[best].priority:
                best = i

        if best is None:
            nxt = _earliest_unfinished(states, finished)
            if nxt is None:
                break
            logger.debug("%s: idle %d..%d", name, time, states[nxt].arrival_time)
            time = states[nxt].arrival_time
            continue

        p = states[best]
        if not p.started:
            p.start_time = time

        step_start = time
        p.remaining_time -= 1
        time += 1
        timeline.append(
            ScheduledSlice(
                pid=p.pid,
                start_time=step_start,
                end_time=time,
                remaining=p.remaining_time,
                priority=p.priority,
            )
        )

        for i, s in enumerate(states):
            if i == best or finished[i]:
                continue
            if s.arrival_time <= time and s.remaining_time > 0 and s.priority > 1:
                s.priority -= 1

        if p.remaining_time == 0:
            finished[best] = True
            p.complete(time)
            completed += 1

    return _build_result(name, states, timeline)


ALGORITHMS = {
    "fcfs": simulate_fcfs,
    "rr": simulate_round_robin,
    "priority": simulate_priority,
    "dynamic": simulate_dynamic_priority,
    "sjf": simulate_sjf,
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)


def run_all(processes: List[Process], quantum: int = DEFAULT_QUANTUM) -> List[ScheduleResult]:
    """
    Run every algorithm on the same process set, in the fixed order
    FCFS, Round Robin, Priority, Dynamic Priority, SJF.
    """
    return [
        simulate_fcfs(processes),
        simulate_round_robin(processes, quantum=quantum),
        simulate_priority(processes),
        simulate_dynamic_priority(processes),
        simulate_sjf(processes),
    ]

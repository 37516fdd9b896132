from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm, run_all
from .gantt import build_rich_gantt
from .generator import generate_processes
from .models import Process, ScheduleResult
from .workload_io import load_workload, save_workload

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 5

MENU_CHOICES = {
    1: ("fcfs", "FCFS (First-Come-First-Served)"),
    2: ("rr", "Round Robin"),
    3: ("priority", "Priority Scheduling (non-preemptive)"),
    4: ("dynamic", "Dynamic Priority (preemptive, with aging)"),
    5: ("sjf", "Shortest Job First (SJF)"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, Round Robin, Priority, Dynamic Priority, SJF).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log scheduling decisions (-v for info, -vv for debug).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_source_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--workload",
            "-w",
            default=None,
            help="Path to JSON or CSV workload file (default: generate a random set).",
        )
        sub.add_argument(
            "--count",
            "-n",
            type=int,
            default=DEFAULT_COUNT,
            help=f"Number of random processes to generate (default: {DEFAULT_COUNT}).",
        )
        sub.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Seed for the random process generator.",
        )

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    add_source_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round robin (default: {DEFAULT_QUANTUM}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run all algorithms on the same process set and compare average times.",
    )
    add_source_arguments(compare_parser)
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for round robin (default: {DEFAULT_QUANTUM}).",
    )

    generate_parser = subparsers.add_parser("generate", help="Write a random workload file.")
    generate_parser.add_argument("--count", "-n", type=int, default=DEFAULT_COUNT)
    generate_parser.add_argument("--seed", type=int, default=None)
    generate_parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Destination .json or .csv file.",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu over a randomly generated process set.",
    )
    menu_parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=None,
        help="Number of processes (prompted for when omitted).",
    )
    menu_parser.add_argument("--seed", type=int, default=None)

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.workload:
        processes = load_workload(Path(args.workload))
        logger.info("Loaded %d processes from %s", len(processes), args.workload)
        return processes
    logger.info("Generating %d processes (seed=%s)", args.count, args.seed)
    return generate_processes(args.count, seed=args.seed)


def _processes_title(args: argparse.Namespace) -> str:
    if args.workload:
        return f"Processes from {args.workload}"
    return "Generated processes"


def _print_processes(processes: List[Process], console: Console, title: str = "Generated processes") -> None:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for h in ["ID", "Arrival", "Burst", "Prio"]:
        table.add_column(h, justify="left")
    for p in processes:
        table.add_row(str(p.pid), str(p.arrival_time), str(p.burst_time), str(p.priority))
    console.print(table)


def _print_execution_log(result: ScheduleResult, console: Console) -> None:
    if result.algorithm == "Round Robin":
        console.print("[bold]Execution log (time slices):[/bold]")
        for sl in result.timeline:
            console.print(
                f"t={sl.start_time} .. {sl.end_time} | P{sl.pid} ran for {sl.run_time}, "
                f"remaining = {sl.remaining}"
            )
    elif result.algorithm == "Dynamic Priority":
        console.print("[bold]Execution log (time = 1 unit per step):[/bold]")
        for sl in result.timeline:
            console.print(
                f"t={sl.start_time} | running P{sl.pid} (prio={sl.priority}), remaining={sl.remaining}"
            )
    else:
        return
    console.print()


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"\n[bold]=== {result.algorithm} Scheduling ===[/bold]")
    if result.quantum is not None:
        console.print(f"[bold]Time quantum:[/bold] {result.quantum}")

    if not result.processes:
        if result.quantum is not None and result.quantum <= 0:
            console.print("[red]Invalid quantum.[/red]")
        else:
            console.print("No processes.")
        return

    console.print()
    _print_execution_log(result, console)

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["ID", "Arrive", "Burst"]
    if result.algorithm == "Priority":
        headers.append("Prio")
    elif result.algorithm == "Dynamic Priority":
        headers.extend(["InitPrio", "FinalPrio"])
    headers.extend(["Start", "Finish", "Waiting", "Turnaround"])

    proc_table = Table(title=f"Result table ({result.algorithm})", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="left")

    for p in result.processes:
        row = [str(p.pid), str(p.arrival_time), str(p.burst_time)]
        if result.algorithm == "Priority":
            row.append(str(p.initial_priority))
        elif result.algorithm == "Dynamic Priority":
            row.extend([str(p.initial_priority), str(p.priority)])
        row.extend([str(p.start_time), str(p.finish_time), str(p.waiting_time), str(p.turnaround_time)])
        proc_table.add_row(*row)

    console.print(proc_table)

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Average waiting time", f"{result.avg_waiting:.2f}")
    sys_table.add_row("Average turnaround time", f"{result.avg_turnaround:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Starvation count", str(sys.starvation_count))

    console.print(sys_table)


def _print_summary(results: List[ScheduleResult], console: Console) -> None:
    summary_table = Table(title="Summary table (average times)", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Avg Waiting", justify="left")
    summary_table.add_column("Avg Turnaround", justify="left")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            f"{result.avg_waiting:.2f}",
            f"{result.avg_turnaround:.2f}",
        )

    console.print(summary_table)


def _run_compare(processes: List[Process], quantum: int, console: Console) -> List[ScheduleResult]:
    """
    Run every algorithm on the process set, print each result and the summary table.
    """
    console.print("\n[bold]=== Running all algorithms on the same process set ===[/bold]")
    console.print(f"[dim]Using quantum = {quantum} for Round Robin.[/dim]")
    results = run_all(processes, quantum=quantum)
    for result in results:
        _print_result(result, console)
    console.print()
    _print_summary(results, console)
    return results


def _read_int(prompt: str) -> Optional[int]:
    """
    Read an integer from stdin; None on non-numeric input or end of input.
    """
    try:
        return int(input(prompt).strip())
    except (ValueError, EOFError):
        return None


def _interactive_menu(count: Optional[int], seed: Optional[int], console: Console) -> None:
    if count is None:
        count = _read_int("Enter number of processes: ")
        if count is None:
            console.print("[red]Input error. Exiting.[/red]")
            return

    if count <= 0:
        console.print("[red]Invalid number.[/red]")
        return

    processes = generate_processes(count, seed=seed)
    _print_processes(processes, console)

    while True:
        console.print("\n[bold cyan]Choose algorithm:[/bold cyan]")
        for idx, (_, label) in MENU_CHOICES.items():
            console.print(f"  [yellow]{idx}[/yellow] - {label}")
        console.print("  [yellow]6[/yellow] - Run ALL algorithms and show summary")
        console.print("  [yellow]0[/yellow] - Exit")

        choice = _read_int("Your choice: ")
        if choice is None:
            console.print("[red]Input error. Exiting.[/red]")
            return

        if choice == 0:
            return

        if choice == 6:
            _run_compare(processes, DEFAULT_QUANTUM, console)
            continue

        if choice not in MENU_CHOICES:
            console.print("[red]Invalid choice.[/red]")
            continue

        alg, _ = MENU_CHOICES[choice]
        quantum = None
        if alg == "rr":
            quantum = _read_int("Enter time quantum: ")
            if quantum is None:
                console.print("[red]Input error. Exiting.[/red]")
                return

        result = run_algorithm(alg, processes, quantum=quantum)
        _print_result(result, console)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    if args.command == "run":
        try:
            processes = _load_processes(args)
            _print_processes(processes, console, title=_processes_title(args))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
        except (ValueError, OSError) as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        _print_result(result, console)
        return 0

    if args.command == "compare":
        try:
            processes = _load_processes(args)
        except (ValueError, OSError) as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        _print_processes(processes, console, title=_processes_title(args))
        _run_compare(processes, args.quantum, console)
        return 0

    if args.command == "generate":
        try:
            processes = generate_processes(args.count, seed=args.seed)
            save_workload(Path(args.output), processes)
        except (ValueError, OSError) as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        console.print(f"Wrote {len(processes)} processes to [green]{args.output}[/green]")
        return 0

    if args.command == "menu":
        _interactive_menu(args.count, args.seed, console)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

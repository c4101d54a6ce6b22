from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Dict, List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .config import DEFAULT_ALGORITHMS, DEFAULT_QUANTUM, QUANTUM_ALGORITHMS, resolve_config
from .engine import run_all
from .errors import InputValidationError
from .gantt import build_rich_gantt, render_units
from .models import ScheduleResult, build_batch
from .timeline import iter_units
from .workload_io import load_workload, parse_triple

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (RR, SJN, Priority, Preemptive Priority, SRT).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON, CSV or TXT workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum for round-robin (default: from workload file, else {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON.")

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON, CSV or TXT workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=None,
        help=f"Algorithms to compare (default: {' '.join(DEFAULT_ALGORITHMS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum used for RR (default: from workload file, else {DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument("--json", action="store_true", help="Print the results as JSON.")

    interactive_parser = subparsers.add_parser(
        "interactive",
        help="Type processes in at the prompt and run every algorithm on them.",
    )
    interactive_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Skip the quantum prompt and use this value.",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)
    console.print(render_units(result.timeline), highlight=False)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Total turnaround", str(summary.total_turnaround))
    sys_table.add_row("Avg turnaround", f"{summary.avg_turnaround:.2f}")
    sys_table.add_row("Total waiting", str(summary.total_waiting))
    sys_table.add_row("Avg waiting", f"{summary.avg_waiting:.2f}")
    sys_table.add_row("Avg response", f"{summary.avg_response:.2f}")
    if result.system:
        system = result.system
        sys_table.add_row("Makespan", str(system.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(results: Dict[str, ScheduleResult], console: Console, title: str) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Makespan", justify="right")

    for result in results.values():
        summary = result.summary
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.avg_waiting:.2f}",
            f"{summary.avg_turnaround:.2f}",
            f"{summary.avg_response:.2f}",
            str(result.system.makespan),
        )

    console.print(summary_table)


def _print_json(results: Dict[str, ScheduleResult], console: Console) -> None:
    payload = {key: asdict(result) for key, result in results.items()}
    console.print_json(json.dumps(payload))


def _animate_result(result: ScheduleResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    units = list(iter_units(result.timeline))
    if not units:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {len(units)} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    run_length = 0
    previous = None
    for t, pid in enumerate(units):
        run_length = run_length + 1 if pid == previous else 1
        previous = pid
        if pid is None:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            console.print(f"t={t:2d}: P{pid} [green]{'█' * run_length}[/green]")
        time.sleep(delay)


def _prompt_int(prompt: str, read: Callable[[str], str], minimum: int, console: Console) -> int:
    while True:
        raw = read(prompt).strip()
        try:
            value = int(raw)
        except ValueError:
            value = None
        if value is not None and value >= minimum:
            return value
        console.print(f"[red]Please enter an integer >= {minimum}.[/red]")


def _interactive(quantum: int | None, console: Console, read: Callable[[str], str] = input) -> None:
    """
    Read a batch the way a classroom exercise types it in, then run every algorithm.
    """
    n = _prompt_int("Enter number of processes: ", read, 1, console)

    triples: List[tuple[int, int, int]] = []
    for pid in range(n):
        while True:
            line = read(f"Enter <arrival>,<burst>,<priority> for P{pid}: ")
            try:
                triples.append(parse_triple(line))
                break
            except InputValidationError as exc:
                console.print(str(exc), style="red", markup=False)

    processes = build_batch(triples)
    if quantum is None:
        quantum = _prompt_int("Enter time quantum for Round Robin: ", read, 1, console)

    results = run_all(processes, quantum)
    for result in results.values():
        console.rule(result.algorithm)
        _print_result(result, console)
    _print_comparison(results, console, "Algorithm comparison")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            workload = load_workload(Path(args.workload))
            config = resolve_config(args.quantum, workload.quantum, [args.algorithm])
            algorithm = config.algorithms[0]
            quantum = config.quantum if algorithm in QUANTUM_ALGORITHMS else None
            result = run_algorithm(algorithm, workload.processes, quantum=quantum)
            if args.json:
                _print_json({algorithm: result}, console)
                return 0
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        if args.command == "compare":
            workload = load_workload(Path(args.workload))
            config = resolve_config(args.quantum, workload.quantum, args.algorithms)
            results = run_all(workload.processes, config.quantum, config.algorithms)
            if args.json:
                _print_json(results, console)
            else:
                _print_comparison(results, console, f"Algorithm comparison: {args.workload}")
            return 0

        if args.command == "interactive":
            if args.quantum is not None:
                resolve_config(args.quantum)
            try:
                _interactive(args.quantum, console, read=input)
            except (EOFError, KeyboardInterrupt):
                console.print()
                console.print("[yellow]Session aborted.[/yellow]")
                return 1
            return 0
    except InputValidationError as exc:
        logger.debug("input rejected", exc_info=True)
        console.print(f"Error: {exc}", style="red", markup=False)
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

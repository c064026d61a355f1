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

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, run_algorithm
from .disk import compare_disk, compute_path
from .gantt import build_disk_chart, build_rich_gantt, narrate_disk, narrate_schedule
from .metrics import summarize_disk_comparison, summarize_process_metrics
from .models import Direction, DiskResult, DiskWorkload, ScheduleResult
from .workload_io import check_tracks, load_disk_workload, load_workload, parse_track_requests


def _add_disk_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to a JSON disk workload ({requests, start, max_track, direction}).",
    )
    parser.add_argument(
        "--requests",
        "-r",
        default=None,
        help='Comma-separated track requests, e.g. "98,183,37,122".',
    )
    parser.add_argument("--start", "-s", type=int, default=None, help="Initial head position.")
    parser.add_argument(
        "--direction",
        "-d",
        choices=[d.value for d in Direction],
        default=None,
        help="Initial sweep direction for SCAN/C-SCAN/LOOK/C-LOOK (default: up).",
    )
    parser.add_argument(
        "--max-track",
        "-m",
        type=int,
        default=None,
        help="Highest track number. Required by SCAN and C-SCAN.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU and disk scheduling simulator (FCFS, SJF, SRTF, Priority, RR; FCFS, SSTF, SCAN, C-SCAN, LOOK, C-LOOK).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every scheduling decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a CPU scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srtf, priority, priority-p, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Replay the run one decision at a time.",
    )
    run_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print why each scheduling decision was made.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple CPU algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS.keys()),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR when included (default: 2).",
    )

    disk_parser = subparsers.add_parser("disk", help="Run a disk scheduling algorithm.")
    disk_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sstf, scan, cscan, look, clook).",
    )
    _add_disk_input_args(disk_parser)
    disk_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print each head movement.",
    )

    disk_compare_parser = subparsers.add_parser(
        "disk-compare",
        help="Run all disk algorithms on the same requests and compare seek counts.",
    )
    _add_disk_input_args(disk_compare_parser)

    return parser


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "Name",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"Name", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            escape(p.name),
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
            "" if p.priority is None else str(p.priority),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
        sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
        sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Starvation count", str(sys.starvation_count))

        console.print(sys_table)


def _step_result(result: ScheduleResult, console: Console) -> None:
    """
    Print every recorded state snapshot, one decision per line.
    """
    if len(result.states) <= 1:
        console.print("[red]No execution to replay.[/red]")
        return

    console.print(f"[bold]Replaying {result.algorithm}[/bold] ({len(result.states) - 1} decisions)")
    for state in result.states[1:]:
        ready = ", ".join(state.ready_queue) or "-"
        running = escape(state.running) if state.running else "[dim]idle[/dim]"
        console.print(
            f"t={state.time:3d}  {state.phase.value:<10}  running={running}  ready={escape(f'[{ready}]')}"
        )


def _print_explanation(lines: List[str], console: Console) -> None:
    console.print("[bold]Step by step:[/bold]")
    for idx, line in enumerate(lines, start=1):
        console.print(f"  {idx:>2}. {escape(line)}")
    console.print()


def _resolve_disk_workload(args: argparse.Namespace) -> DiskWorkload:
    """
    Build the disk workload from a file and/or command-line options; options win.
    """
    if args.workload:
        workload = load_disk_workload(Path(args.workload))
    else:
        if args.requests is None or args.start is None:
            raise ValueError("Give --workload, or both --requests and --start")
        workload = DiskWorkload(requests=[], start=args.start)

    if args.requests is not None:
        workload.requests = parse_track_requests(args.requests)
    if args.start is not None:
        workload.start = args.start
    if args.direction is not None:
        workload.direction = args.direction
    if args.max_track is not None:
        workload.max_track = args.max_track

    if workload.max_track is not None:
        check_tracks(workload.requests, workload.max_track)
    return workload


def _chart_extent(result: DiskResult, workload: DiskWorkload) -> int:
    if workload.max_track is not None:
        return workload.max_track
    return max([1] + [t for t in result.path if t > 0])


def _run_disk(args: argparse.Namespace, console: Console) -> None:
    workload = _resolve_disk_workload(args)
    result = compute_path(
        args.algorithm,
        workload.requests,
        workload.start,
        direction=workload.direction,
        max_track=workload.max_track,
    )

    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    console.print(f"[bold]Requests:[/bold] {', '.join(str(r) for r in workload.requests)}")
    console.print(f"[bold]Path:[/bold] {' -> '.join(str(t) for t in result.path)}")
    console.print()
    console.print(build_disk_chart(result, _chart_extent(result, workload)))
    if args.explain:
        _print_explanation(narrate_disk(result), console)
    console.print(f"[bold]Total seek count:[/bold] {result.seek_count}")


def _run_disk_compare(args: argparse.Namespace, console: Console) -> None:
    workload = _resolve_disk_workload(args)
    results = compare_disk(
        workload.requests,
        workload.start,
        direction=workload.direction,
        max_track=workload.max_track,
    )
    summary = summarize_disk_comparison(results)

    table = Table(title="Disk algorithm comparison", box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Seek count", justify="right")
    table.add_column("Path")

    for key, result in results.items():
        best = summary[key]["best"]
        style = "bold green" if best else None
        table.add_row(
            result.algorithm + (" *" if best else ""),
            str(result.seek_count),
            " ".join(str(t) for t in result.path),
            style=style,
        )

    console.print(table)
    console.print("[dim]* minimum seek count[/dim]")


def _run_compare(args: argparse.Namespace, console: Console) -> None:
    processes = load_workload(Path(args.workload))

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in args.algorithms:
        q = args.quantum if alg.lower() in QUANTUM_ALGORITHMS else None
        result = run_algorithm(alg, processes, quantum=q)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum, keep_states=args.step)
            if args.step:
                _step_result(result, console)
                console.print()
            if args.explain:
                _print_explanation(narrate_schedule(result), console)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            _run_compare(args, console)
            return 0

        if args.command == "disk":
            _run_disk(args, console)
            return 0

        if args.command == "disk-compare":
            _run_disk_compare(args, console)
            return 0
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

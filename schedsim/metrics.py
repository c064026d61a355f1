from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from .models import DiskResult, GanttSegment, Process, ProcessMetrics, ScheduleResult, SystemMetrics


def compute_process_metrics(
    processes: Iterable[Process], segments: Iterable[GanttSegment]
) -> List[ProcessMetrics]:
    """
    Derive per-process timings from the Gantt segments, in workload order.

    Completion is the latest segment end, response is measured from arrival to
    the first segment start and waiting is turnaround minus burst.
    """
    owned: Dict[str, List[GanttSegment]] = {}
    for seg in segments:
        if seg.idle:
            continue
        owned.setdefault(seg.name, []).append(seg)

    metrics: List[ProcessMetrics] = []
    for p in processes:
        slices = owned.get(p.name)
        if not slices:
            continue

        start_time = min(s.start_time for s in slices)
        completion_time = max(s.end_time for s in slices)
        turnaround_time = completion_time - p.arrival_time

        metrics.append(
            ProcessMetrics(
                name=p.name,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
                priority=p.priority,
            )
        )
    return metrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline segments.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(seg.duration for seg in result.busy_segments)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # Processes waiting more than twice the average count as starved.
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


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def seek_count(path: Sequence[int]) -> int:
    """Total head movement along ``path``, the first entry being the start position."""
    return sum(abs(b - a) for a, b in zip(path, path[1:]))


def summarize_disk_comparison(results: Mapping[str, DiskResult]) -> Dict[str, dict]:
    """
    Map each algorithm to its seek count, flagging the minimum (ties all flagged).
    """
    if not results:
        return {}

    best = min(r.seek_count for r in results.values())
    return {
        name: {"seek_count": r.seek_count, "best": r.seek_count == best}
        for name, r in results.items()
    }

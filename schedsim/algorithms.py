from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .engine import compute_full_trace
from .models import Process, ScheduleResult
from .policies import (
    FCFSPolicy,
    PreemptivePriorityPolicy,
    PriorityPolicy,
    RoundRobinPolicy,
    SchedulingPolicy,
    SJFPolicy,
    SRTFPolicy,
)


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Equal arrival times are served in workload order.
    """
    return compute_full_trace(processes, FCFSPolicy(), keep_states=keep_states)


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Whenever the CPU is free, among processes that have arrived and are not
    yet completed, choose the one with the smallest burst time.
    """
    return compute_full_trace(processes, SJFPolicy(), keep_states=keep_states)


def schedule_srtf(processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return compute_full_trace(processes, SRTFPolicy(), keep_states=keep_states)


def schedule_priority(processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; processes without a
    priority rank below all others.
    """
    return compute_full_trace(processes, PriorityPolicy(), keep_states=keep_states)


def schedule_priority_preemptive(
    processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False
) -> ScheduleResult:
    """
    Static Priority scheduling with preemption on strictly higher priority.
    """
    return compute_full_trace(processes, PreemptivePriorityPolicy(), keep_states=keep_states)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.
    """
    return compute_full_trace(processes, RoundRobinPolicy(quantum), keep_states=keep_states)


ALGORITHMS: Dict[str, Callable[..., ScheduleResult]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "priority": schedule_priority,
    "priority-p": schedule_priority_preemptive,
    "rr": schedule_rr,
}

QUANTUM_ALGORITHMS = {"rr"}


def make_policy(name: str, quantum: Optional[int] = None) -> SchedulingPolicy:
    """
    Build the policy object behind an algorithm name, for stepping a run by hand.
    """
    name = name.lower()
    if name == "rr":
        return RoundRobinPolicy(quantum)
    for policy_cls in (FCFSPolicy, SJFPolicy, SRTFPolicy, PriorityPolicy, PreemptivePriorityPolicy):
        if policy_cls.key == name:
            return policy_cls()
    raise ValueError(f"Unknown or unimplemented algorithm '{name}'")


def run_algorithm(
    name: str, processes: List[Process], quantum: Optional[int] = None, keep_states: bool = False
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown or unimplemented algorithm '{name}'")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum, keep_states=keep_states)

from __future__ import annotations

from typing import Optional

from .models import Process, SimulationState


def _priority_rank(p: Process) -> float:
    # Treat missing priority as lowest priority.
    return p.priority if p.priority is not None else float("inf")


class SchedulingPolicy:
    """
    Strategy deciding which process owns the CPU for the next time unit.

    Non-preemptive policies are only consulted when the CPU is free; the
    running process is returned unchanged otherwise. ``quantum`` is set only
    by time-sliced policies and tells the driver when to rotate.
    """

    key = ""
    label = ""
    preemptive = False
    quantum: Optional[int] = None

    def select_next(self, state: SimulationState) -> Optional[str]:
        if state.running is not None and not self.preemptive:
            return state.running
        return self.choose(state)

    def choose(self, state: SimulationState) -> Optional[str]:
        raise NotImplementedError

    def reason(self, state: SimulationState, name: str) -> str:
        return "selected"


class FCFSPolicy(SchedulingPolicy):
    """
    Earliest arrival wins; equal arrivals keep their workload order.
    """

    key = "fcfs"
    label = "FCFS"

    def choose(self, state: SimulationState) -> Optional[str]:
        return min(state.active, key=lambda n: state.process(n).arrival_time, default=None)

    def reason(self, state: SimulationState, name: str) -> str:
        return f"earliest arrival (t={state.process(name).arrival_time})"


class SJFPolicy(SchedulingPolicy):
    key = "sjf"
    label = "SJF (non-preemptive)"

    def choose(self, state: SimulationState) -> Optional[str]:
        return min(state.active, key=lambda n: state.process(n).burst_time, default=None)

    def reason(self, state: SimulationState, name: str) -> str:
        return f"shortest burst ({state.process(name).burst_time})"


class PriorityPolicy(SchedulingPolicy):
    """
    Static priority, non-preemptive. Lower number means higher priority.
    """

    key = "priority"
    label = "Priority (non-preemptive)"

    def choose(self, state: SimulationState) -> Optional[str]:
        return min(state.active, key=lambda n: _priority_rank(state.process(n)), default=None)

    def reason(self, state: SimulationState, name: str) -> str:
        return f"highest priority ({state.process(name).priority})"


class _PreemptiveMinimumPolicy(SchedulingPolicy):
    """
    Re-ranks every arrived process each time unit. The running process keeps
    the CPU unless a strictly better candidate exists.
    """

    preemptive = True

    def rank(self, state: SimulationState, name: str) -> float:
        raise NotImplementedError

    def choose(self, state: SimulationState) -> Optional[str]:
        best = min(state.active, key=lambda n: self.rank(state, n), default=None)
        running = state.running
        if best is None or running is None:
            return best
        if self.rank(state, running) <= self.rank(state, best):
            return running
        return best


class SRTFPolicy(_PreemptiveMinimumPolicy):
    key = "srtf"
    label = "SRTF"

    def rank(self, state: SimulationState, name: str) -> float:
        return state.remaining_of(name)

    def reason(self, state: SimulationState, name: str) -> str:
        return f"shortest remaining time ({state.remaining_of(name)})"


class PreemptivePriorityPolicy(_PreemptiveMinimumPolicy):
    key = "priority-p"
    label = "Priority (preemptive)"

    def rank(self, state: SimulationState, name: str) -> float:
        return _priority_rank(state.process(name))

    def reason(self, state: SimulationState, name: str) -> str:
        return f"highest priority ({state.process(name).priority})"


class RoundRobinPolicy(SchedulingPolicy):
    """
    FIFO ready queue with a fixed time quantum. The driver rotates the running
    process to the tail once it has used ``quantum`` units.
    """

    key = "rr"
    label = "Round Robin"

    def __init__(self, quantum: Optional[int]) -> None:
        if quantum is None or quantum <= 0:
            raise ValueError("Round Robin requires a positive quantum (use --quantum)")
        self.quantum = quantum

    def choose(self, state: SimulationState) -> Optional[str]:
        return state.ready_queue[0] if state.ready_queue else None

    def reason(self, state: SimulationState, name: str) -> str:
        return f"head of ready queue (quantum {self.quantum})"

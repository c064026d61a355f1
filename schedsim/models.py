from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

IDLE_NAME = "Idle"


@dataclass(frozen=True)
class Process:
    name: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class GanttSegment:
    """
    One contiguous interval of CPU occupancy in the Gantt chart.

    ``completed`` is True when the owning process finished at ``end_time``;
    False marks a preemption (or a quantum expiry handing the CPU to someone
    else). Idle intervals carry ``idle=True`` and the name ``"Idle"``.
    """

    name: str
    start_time: int
    end_time: int
    completed: bool = False
    idle: bool = False

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    name: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    starvation_count: int = 0


class Phase(str, Enum):
    """
    Driver phase recorded on every state snapshot.

    IDLE is the not-yet-started state, SCHEDULING follows a completion or an
    idle jump, RUNNING follows a time unit of execution and PREEMPTED follows
    a time unit that started by taking the CPU from another process.
    """

    IDLE = "idle"
    SCHEDULING = "scheduling"
    RUNNING = "running"
    PREEMPTED = "preempted"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TraceEvent:
    time: int
    kind: str  # arrive, dispatch, preempt, rotate, complete, idle
    name: str
    detail: str = ""


@dataclass(frozen=True)
class SimulationState:
    """
    Immutable snapshot of a CPU simulation at one decision point.

    ``remaining`` is aligned with ``processes``. ``active`` holds admitted,
    unfinished processes in admission order (the running one included);
    ``ready_queue`` holds the waiting ones in FIFO order (running excluded).
    ``step_events`` are only the events recorded by the decision that produced
    this snapshot; the full log and the closed segments are collected by
    ``compute_full_trace`` from each step.
    """

    processes: Tuple[Process, ...]
    remaining: Tuple[int, ...]
    pending: Tuple[str, ...]
    time: int = 0
    phase: Phase = Phase.IDLE
    active: Tuple[str, ...] = ()
    ready_queue: Tuple[str, ...] = ()
    running: Optional[str] = None
    slice_used: int = 0
    open_segment: Optional[GanttSegment] = None
    step_events: Tuple[TraceEvent, ...] = ()

    @property
    def terminal(self) -> bool:
        return self.phase is Phase.COMPLETED

    def index_of(self, name: str) -> int:
        for idx, p in enumerate(self.processes):
            if p.name == name:
                return idx
        raise KeyError(name)

    def process(self, name: str) -> Process:
        return self.processes[self.index_of(name)]

    def remaining_of(self, name: str) -> int:
        return self.remaining[self.index_of(name)]


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[GanttSegment] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
    events: List[TraceEvent] = field(default_factory=list)
    states: List[SimulationState] = field(default_factory=list)
    terminal: bool = True

    @property
    def busy_segments(self) -> List[GanttSegment]:
        return [s for s in self.timeline if not s.idle]

    @property
    def metrics_by_name(self) -> Dict[str, ProcessMetrics]:
        return {m.name: m for m in self.processes}


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class WrapMode(Enum):
    """How a sweep continues once the leading side is exhausted."""

    NONE = "none"
    BOUNDARY = "boundary"
    NEAREST_REQUEST = "nearest_request"


@dataclass(frozen=True)
class DiskStep:
    track: int
    distance: int
    kind: str  # start, serve, boundary, wrap


@dataclass
class DiskResult:
    algorithm: str
    start: int
    steps: List[DiskStep] = field(default_factory=list)
    direction: Optional[Direction] = None
    max_track: Optional[int] = None

    @property
    def path(self) -> List[int]:
        return [s.track for s in self.steps]

    @property
    def seek_count(self) -> int:
        return sum(s.distance for s in self.steps)


@dataclass
class DiskWorkload:
    requests: List[int]
    start: int
    max_track: Optional[int] = None
    direction: str = Direction.UP.value

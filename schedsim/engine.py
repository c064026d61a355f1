"""
Generic CPU simulation driver.

Every CPU algorithm runs through the same stepper: ``advance`` moves a
``SimulationState`` forward by one decision and ``compute_full_trace`` repeats
it until the run is terminal. A decision is one of

- closing the segment of a process that has just finished,
- jumping over an idle gap to the next arrival,
- admitting arrivals, asking the policy for a process and running it for one
  time unit.

Each step emits at most one closed ``GanttSegment``, so a replaying consumer
sees exactly the segments of the full computation, in the same order.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Tuple

from .metrics import compute_process_metrics, compute_system_metrics
from .models import (
    IDLE_NAME,
    GanttSegment,
    Phase,
    Process,
    ScheduleResult,
    SimulationState,
    TraceEvent,
)
from .policies import SchedulingPolicy

logger = logging.getLogger(__name__)


def initial_state(processes: Iterable[Process]) -> SimulationState:
    procs = tuple(processes)
    for p in procs:
        if p.burst_time <= 0:
            raise ValueError(f"Process {p.name!r} has non-positive burst time {p.burst_time}")
    return SimulationState(
        processes=procs,
        remaining=tuple(p.burst_time for p in procs),
        pending=tuple(p.name for p in procs),
        phase=Phase.IDLE if procs else Phase.COMPLETED,
    )


def advance(
    state: SimulationState, policy: SchedulingPolicy
) -> Tuple[SimulationState, Optional[GanttSegment]]:
    """
    Perform one decision and return the new state plus the segment it closed.
    """
    if state.terminal:
        return state, None

    # Completion is checked before any arrival at the same instant is admitted.
    if state.running is not None and state.remaining_of(state.running) == 0:
        return _complete_running(state)

    time = state.time
    events: List[TraceEvent] = []
    ready = list(state.ready_queue)

    # Arrivals before ``time`` were admitted by earlier steps, so the rotated
    # process goes ahead of anything arriving exactly as its quantum ends.
    running = state.running
    slice_used = state.slice_used
    if running is not None and policy.quantum is not None and slice_used >= policy.quantum:
        ready.append(running)
        events.append(TraceEvent(time, "rotate", running, f"quantum of {policy.quantum} expired"))
        logger.debug("t=%d rotate %s to queue tail", time, running)
        running = None
        slice_used = 0

    arrived = tuple(n for n in state.pending if state.process(n).arrival_time <= time)
    pending = tuple(n for n in state.pending if n not in arrived)
    active = state.active + arrived
    ready.extend(arrived)
    for name in arrived:
        events.append(TraceEvent(time, "arrive", name, "joins the ready queue"))
        logger.debug("t=%d arrive %s", time, name)

    if not active:
        return _idle_until_next_arrival(state, pending, events)

    staged = replace(
        state,
        pending=pending,
        active=active,
        ready_queue=tuple(ready),
        running=running,
        slice_used=slice_used,
        step_events=tuple(events),
    )
    chosen = policy.select_next(staged)
    if chosen is None:
        raise RuntimeError(
            f"{policy.label} selected nothing at t={time} with {len(active)} active process(es)"
        )

    emitted: Optional[GanttSegment] = None
    phase = Phase.RUNNING
    open_segment = state.open_segment

    if open_segment is not None and open_segment.name != chosen:
        emitted = replace(open_segment, end_time=time, completed=False)
        open_segment = None
        phase = Phase.PREEMPTED
        events.append(TraceEvent(time, "preempt", emitted.name, f"{chosen} takes the CPU"))
        logger.debug("t=%d preempt %s for %s", time, emitted.name, chosen)

    if running is not None and running != chosen:
        ready.append(running)

    if chosen != running:
        ready.remove(chosen)
        slice_used = 0
        events.append(TraceEvent(time, "dispatch", chosen, policy.reason(staged, chosen)))
        logger.debug("t=%d dispatch %s", time, chosen)

    if open_segment is None:
        open_segment = GanttSegment(name=chosen, start_time=time, end_time=time)

    idx = state.index_of(chosen)
    remaining = list(state.remaining)
    remaining[idx] -= 1
    time += 1

    new_state = replace(
        state,
        remaining=tuple(remaining),
        pending=pending,
        time=time,
        phase=phase,
        active=active,
        ready_queue=tuple(ready),
        running=chosen,
        slice_used=slice_used + 1,
        open_segment=replace(open_segment, end_time=time),
        step_events=tuple(events),
    )
    return new_state, emitted


def _complete_running(state: SimulationState) -> Tuple[SimulationState, GanttSegment]:
    name = state.running
    segment = replace(state.open_segment, end_time=state.time, completed=True)
    active = tuple(n for n in state.active if n != name)
    done = not active and not state.pending
    event = TraceEvent(state.time, "complete", name, "burst finished")
    logger.debug("t=%d complete %s", state.time, name)
    new_state = replace(
        state,
        phase=Phase.COMPLETED if done else Phase.SCHEDULING,
        active=active,
        running=None,
        slice_used=0,
        open_segment=None,
        step_events=(event,),
    )
    return new_state, segment


def _idle_until_next_arrival(
    state: SimulationState, pending: Tuple[str, ...], events: List[TraceEvent]
) -> Tuple[SimulationState, Optional[GanttSegment]]:
    if not pending:
        return replace(state, phase=Phase.COMPLETED, pending=pending, step_events=tuple(events)), None

    next_arrival = min(state.process(n).arrival_time for n in pending)
    emitted: Optional[GanttSegment] = None
    if next_arrival > state.time:
        emitted = GanttSegment(
            name=IDLE_NAME, start_time=state.time, end_time=next_arrival, completed=True, idle=True
        )
        events.append(TraceEvent(state.time, "idle", IDLE_NAME, f"no process ready until t={next_arrival}"))
        logger.debug("t=%d idle until %d", state.time, next_arrival)

    new_state = replace(
        state,
        pending=pending,
        time=max(state.time, next_arrival),
        phase=Phase.SCHEDULING,
        step_events=tuple(events),
    )
    return new_state, emitted


def iter_states(processes: Iterable[Process], policy: SchedulingPolicy) -> Iterator[SimulationState]:
    """
    Yield the initial state and every state after it, ending with the terminal one.
    """
    state = initial_state(processes)
    yield state
    while not state.terminal:
        state, _ = advance(state, policy)
        yield state


def compute_full_trace(
    processes: Iterable[Process], policy: SchedulingPolicy, keep_states: bool = False
) -> ScheduleResult:
    """
    Run ``policy`` over the workload and collect segments, events and metrics.

    With ``keep_states`` every intermediate snapshot is kept on the result so a
    renderer can replay the run without re-deriving any decision.
    """
    procs = list(processes)
    state = initial_state(procs)
    states: List[SimulationState] = [state] if keep_states else []
    timeline: List[GanttSegment] = []
    events: List[TraceEvent] = []

    while not state.terminal:
        state, segment = advance(state, policy)
        if segment is not None:
            timeline.append(segment)
        events.extend(state.step_events)
        if keep_states:
            states.append(state)

    result = ScheduleResult(
        algorithm=policy.label,
        quantum=policy.quantum,
        processes=compute_process_metrics(procs, timeline),
        timeline=timeline,
        events=events,
        states=states,
        terminal=state.terminal,
    )
    compute_system_metrics(result)
    return result

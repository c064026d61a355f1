import pytest

from schedsim.algorithms import ALGORITHMS, make_policy, run_algorithm
from schedsim.engine import advance, compute_full_trace, initial_state, iter_states
from schedsim.models import Phase, Process
from schedsim.policies import PreemptivePriorityPolicy, SRTFPolicy


def _workload():
    return [
        Process("A", 0, 7, 3),
        Process("B", 2, 4, 1),
        Process("C", 4, 1, 4),
        Process("D", 5, 4, 2),
        Process("E", 20, 3, 0),
    ]


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_incremental_matches_full_trace(name):
    policy = make_policy(name, quantum=2)
    full = compute_full_trace(_workload(), policy)

    state = initial_state(_workload())
    emitted = []
    events = []
    while not state.terminal:
        state, segment = advance(state, policy)
        if segment is not None:
            emitted.append(segment)
        events.extend(state.step_events)

    assert emitted == full.timeline
    assert events == full.events


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_running_twice_is_identical(name):
    first = run_algorithm(name, _workload(), quantum=3, keep_states=True)
    second = run_algorithm(name, _workload(), quantum=3, keep_states=True)
    assert repr(first.timeline) == repr(second.timeline)
    assert first.events == second.events
    assert first.states == second.states


def test_snapshots_do_not_grow_with_trace_length():
    procs = [Process("A", 0, 2000), Process("B", 0, 2000)]
    res = run_algorithm("rr", procs, quantum=1, keep_states=True)
    assert len(res.timeline) == 4000
    assert max(len(s.step_events) for s in res.states) <= 3
    assert sum(len(s.step_events) for s in res.states) == len(res.events)


def test_states_start_idle_and_end_completed():
    states = list(iter_states(_workload(), make_policy("fcfs")))
    assert states[0].phase is Phase.IDLE
    assert states[-1].phase is Phase.COMPLETED
    assert all(not s.terminal for s in states[:-1])
    times = [s.time for s in states]
    assert times == sorted(times)


def test_empty_workload_starts_terminal():
    state = initial_state([])
    assert state.terminal
    assert advance(state, make_policy("fcfs")) == (state, None)


def test_non_positive_burst_fails_fast():
    with pytest.raises(ValueError):
        initial_state([Process("bad", 0, 0)])


def test_keep_states_records_every_decision():
    res = run_algorithm("srtf", [Process("P1", 0, 8), Process("P2", 1, 4)], keep_states=True)
    assert res.states[0].phase is Phase.IDLE
    assert res.states[-1].terminal
    phases = [s.phase for s in res.states]
    assert Phase.PREEMPTED in phases
    preempted = next(s for s in res.states if s.phase is Phase.PREEMPTED)
    assert preempted.running == "P2"
    assert preempted.time == 2
    assert preempted.ready_queue == ("P1",)


def test_event_log_explains_decisions():
    res = run_algorithm("srtf", [Process("P1", 0, 8), Process("P2", 1, 4)])
    kinds = [(e.time, e.kind, e.name) for e in res.events]
    assert kinds == [
        (0, "arrive", "P1"),
        (0, "dispatch", "P1"),
        (1, "arrive", "P2"),
        (1, "preempt", "P1"),
        (1, "dispatch", "P2"),
        (5, "complete", "P2"),
        (5, "dispatch", "P1"),
        (12, "complete", "P1"),
    ]
    assert "shortest remaining time" in res.events[1].detail


def test_rr_rotation_is_logged():
    res = run_algorithm("rr", [Process("A", 0, 3), Process("B", 0, 1)], quantum=2)
    rotations = [(e.time, e.name) for e in res.events if e.kind == "rotate"]
    assert rotations == [(2, "A")]


def test_idle_event_names_next_arrival():
    res = run_algorithm("fcfs", [Process("late", 4, 1)])
    idle = [e for e in res.events if e.kind == "idle"]
    assert len(idle) == 1
    assert idle[0].time == 0
    assert "t=4" in idle[0].detail


@pytest.mark.parametrize(
    "policy, rank",
    [
        (SRTFPolicy(), lambda state, name, ran: state.remaining_of(name) + (1 if name == ran else 0)),
        (PreemptivePriorityPolicy(), lambda state, name, ran: state.process(name).priority),
    ],
)
def test_preemptive_policies_always_run_the_best_candidate(policy, rank):
    for state in iter_states(_workload(), policy):
        if state.phase not in (Phase.RUNNING, Phase.PREEMPTED):
            continue
        ran = state.running
        # Ranks as they stood when the last time unit was handed out.
        best = min(rank(state, n, ran) for n in state.active)
        assert rank(state, ran, ran) == best

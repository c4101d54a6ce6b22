"""
Generic simulation driver shared by every scheduling policy.

The driver owns the clock, the arena of per-run process states and the
timeline; policies only decide who runs next and for how long.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_ALGORITHMS
from .errors import InvariantViolation
from .metrics import compute_process_metrics, compute_system_metrics, summarize_process_metrics
from .models import Process, ProcessState, ScheduleResult, new_arena, validate_batch
from .policies import Dispatch, Policy, make_policy
from .timeline import Timeline

logger = logging.getLogger(__name__)


def _scan_order(arena: Sequence[ProcessState]) -> List[ProcessState]:
    return sorted(arena, key=lambda s: (s.process.arrival_time, s.pid))


def _ready(order: Sequence[ProcessState], time: int) -> List[ProcessState]:
    return [s for s in order if not s.finished and s.process.arrival_time <= time]


def _next_arrival(order: Sequence[ProcessState], time: int) -> int:
    pending = [s.process.arrival_time for s in order if not s.finished]
    if not pending:
        raise InvariantViolation("Driver idled with every process already finished")
    nxt = min(pending)
    if nxt <= time:
        raise InvariantViolation(
            f"Policy declined to dispatch at t={time} although a process is ready"
        )
    return nxt


def _check_dispatch(dispatch: Dispatch, time: int, ready: Sequence[ProcessState]) -> None:
    state = dispatch.state
    if not any(s is state for s in ready):
        raise InvariantViolation(
            f"Policy chose P{state.pid} at t={time}, which is finished or has not arrived"
        )
    if not 1 <= dispatch.quantum <= state.remaining_time:
        raise InvariantViolation(
            f"Policy chose quantum {dispatch.quantum} for P{state.pid} "
            f"with {state.remaining_time} units remaining"
        )


def simulate(processes: Sequence[Process], policy: Policy) -> ScheduleResult:
    """
    Run one scheduling discipline over its own copy of ``processes``.

    Each loop iteration either jumps the clock to the next arrival when no
    process is ready (recording the gap as idle), or dispatches the policy's
    choice for its quantum and marks completion when the remaining time
    reaches zero.
    """
    validate_batch(processes)

    arena = new_arena(processes)
    order = _scan_order(arena)
    timeline = Timeline()
    policy.start(arena)

    time = 0
    finished = 0
    n = len(arena)

    while finished < n:
        ready = _ready(order, time)
        dispatch = policy.select(time, ready)

        if dispatch is None:
            nxt = _next_arrival(order, time)
            logger.debug("%s: idle from t=%d to t=%d", policy.name, time, nxt)
            timeline.record_idle(time, nxt)
            time = nxt
            continue

        _check_dispatch(dispatch, time, ready)
        state = dispatch.state
        if state.start_time is None:
            state.start_time = time

        logger.debug("%s: t=%d run P%d for %d", policy.name, time, state.pid, dispatch.quantum)
        timeline.record(state.pid, time, dispatch.quantum)
        state.remaining_time -= dispatch.quantum
        time += dispatch.quantum

        if state.finished:
            state.completion_time = time
            finished += 1

        policy.release(time, state, _ready(order, time))

    metrics = compute_process_metrics(arena)
    result = ScheduleResult(
        algorithm=policy.name,
        quantum=policy.quantum,
        processes=metrics,
        timeline=timeline.slices,
        summary=summarize_process_metrics(metrics),
    )
    compute_system_metrics(result)

    logger.info(
        "%s finished %d processes at t=%d (avg waiting %.2f)",
        result.algorithm,
        n,
        time,
        result.summary.avg_waiting,
    )
    return result


def run_all(
    processes: Sequence[Process],
    quantum: Optional[int],
    algorithms: Sequence[str] = DEFAULT_ALGORITHMS,
) -> Dict[str, ScheduleResult]:
    """
    Run each named algorithm on an independent copy of the same batch.

    Policies are all built up front so that a bad quantum or algorithm name
    fails before any run starts.
    """
    validate_batch(processes)
    policies = [(key, make_policy(key, quantum)) for key in algorithms]
    return {key: simulate(processes, policy) for key, policy in policies}

from __future__ import annotations

from typing import List, Optional

from .engine import simulate
from .errors import InputValidationError
from .models import Process, ScheduleResult
from .policies import (
    PriorityNonPreemptive,
    PriorityPreemptive,
    RoundRobin,
    ShortestJobNext,
    ShortestRemainingTime,
)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.
    """
    return simulate(processes, RoundRobin(quantum))


def schedule_sjn(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job Next (non-preemptive).

    At each completion, among processes that have arrived and are not yet
    completed, run the one with the smallest burst time to completion.
    """
    return simulate(processes, ShortestJobNext())


def schedule_priority(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Only processes that
    have already arrived are compared.
    """
    return simulate(processes, PriorityNonPreemptive())


def schedule_priority_preemptive(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static priority scheduling, re-evaluated every time unit.
    """
    return simulate(processes, PriorityPreemptive())


def schedule_srt(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive SJN), re-evaluated every time unit.
    """
    return simulate(processes, ShortestRemainingTime())


ALGORITHMS = {
    "rr": schedule_rr,
    "sjn": schedule_sjn,
    "priority": schedule_priority,
    "ppriority": schedule_priority_preemptive,
    "srt": schedule_srt,
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InputValidationError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)

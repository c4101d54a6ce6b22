from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InputValidationError


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class ProcessState:
    """
    Mutable per-run bookkeeping for one process.

    Every simulation run builds its own list of these (the arena), indexed
    by pid, so runs never observe each other's progress.
    """

    process: Process
    remaining_time: int
    start_time: Optional[int] = None
    completion_time: Optional[int] = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def finished(self) -> bool:
        return self.remaining_time == 0


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution in the Gantt chart.

    ``pid`` is None for a stretch where the CPU sat idle.
    """

    pid: Optional[int]
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def idle(self) -> bool:
        return self.pid is None

    @property
    def label(self) -> str:
        return "idle" if self.pid is None else f"P{self.pid}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int


@dataclass
class BatchSummary:
    total_turnaround: int
    avg_turnaround: float
    total_waiting: int
    avg_waiting: float
    avg_response: float


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    summary: Optional[BatchSummary] = None
    system: Optional[SystemMetrics] = None


def _require_int(value, what: str) -> int:
    # bool is an int subclass; "True" as a burst time is never intended.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(f"{what} must be an integer, got {value!r}")
    return value


def build_batch(triples: Iterable[Tuple[int, int, int]]) -> List[Process]:
    """
    Turn ``(arrival, burst, priority)`` triples into validated processes
    with sequential ids in input order.
    """
    processes: List[Process] = []
    for pid, triple in enumerate(triples):
        try:
            arrival_time, burst_time, priority = triple
        except (TypeError, ValueError) as exc:
            raise InputValidationError(
                f"P{pid}: expected (arrival, burst, priority), got {triple!r}"
            ) from exc
        processes.append(
            Process(
                pid=pid,
                arrival_time=arrival_time,
                burst_time=burst_time,
                priority=priority,
            )
        )

    validate_batch(processes)
    return processes


def validate_batch(processes: Sequence[Process]) -> None:
    if not processes:
        raise InputValidationError("At least one process is required")

    for index, p in enumerate(processes):
        pid = _require_int(p.pid, "pid")
        if pid != index:
            raise InputValidationError(
                f"Process ids must be sequential from 0 in input order; "
                f"found pid {pid} at position {index}"
            )

        name = f"P{pid}"
        arrival_time = _require_int(p.arrival_time, f"{name} arrival time")
        burst_time = _require_int(p.burst_time, f"{name} burst time")
        _require_int(p.priority, f"{name} priority")

        if arrival_time < 0:
            raise InputValidationError(f"{name} arrival time must be >= 0, got {arrival_time}")
        if burst_time <= 0:
            raise InputValidationError(f"{name} burst time must be > 0, got {burst_time}")


def new_arena(processes: Sequence[Process]) -> List[ProcessState]:
    return [ProcessState(process=p, remaining_time=p.burst_time) for p in processes]

from __future__ import annotations

from typing import List, Sequence

from .errors import InvariantViolation
from .models import BatchSummary, ProcessMetrics, ProcessState, ScheduleResult, SystemMetrics
from .timeline import busy_time


def compute_process_metrics(arena: Sequence[ProcessState]) -> List[ProcessMetrics]:
    """
    Derive turnaround, waiting and response time for a finished run.

    Every process must already have a completion time; asking earlier means
    the driver stopped too soon.
    """
    metrics: List[ProcessMetrics] = []
    for state in arena:
        p = state.process
        if state.completion_time is None or state.start_time is None or not state.finished:
            raise InvariantViolation(f"{p.label} has not completed; metrics are unavailable")

        turnaround_time = state.completion_time - p.arrival_time
        waiting_time = turnaround_time - p.burst_time
        if waiting_time < 0 or state.start_time < p.arrival_time:
            raise InvariantViolation(
                f"{p.label} ran before it could have: start={state.start_time}, "
                f"completion={state.completion_time}, arrival={p.arrival_time}"
            )

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=state.start_time,
                completion_time=state.completion_time,
                turnaround_time=turnaround_time,
                waiting_time=waiting_time,
                response_time=state.start_time - p.arrival_time,
            )
        )
    return metrics


def summarize_process_metrics(processes: Sequence[ProcessMetrics]) -> BatchSummary:
    """
    Totals and arithmetic means of the per-process metrics.
    """
    if not processes:
        return BatchSummary(
            total_turnaround=0, avg_turnaround=0.0, total_waiting=0, avg_waiting=0.0, avg_response=0.0
        )

    n = len(processes)
    total_turnaround = sum(p.turnaround_time for p in processes)
    total_waiting = sum(p.waiting_time for p in processes)
    return BatchSummary(
        total_turnaround=total_turnaround,
        avg_turnaround=total_turnaround / n,
        total_waiting=total_waiting,
        avg_waiting=total_waiting / n,
        avg_response=sum(p.response_time for p in processes) / n,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices.
    """
    if not result.processes:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = busy_time(result.timeline)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system

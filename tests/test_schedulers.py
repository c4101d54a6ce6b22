import pytest

from schedsim.algorithms import (
    run_algorithm,
    schedule_priority,
    schedule_priority_preemptive,
    schedule_rr,
    schedule_sjn,
    schedule_srt,
)
from schedsim.errors import InputValidationError
from schedsim.models import build_batch
from test_engine import BATCHES


def _spans(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.timeline]


def _by_pid(result):
    return {p.pid: p for p in result.processes}


def test_rr_quantum_2(reference_batch):
    res = schedule_rr(reference_batch, quantum=2)
    assert _spans(res) == [
        (0, 0, 2),
        (1, 2, 4),
        (2, 4, 6),
        (0, 6, 8),
        (3, 8, 10),
        (1, 10, 11),
        (2, 11, 13),
        (0, 13, 14),
        (3, 14, 16),
        (2, 16, 18),
        (3, 18, 20),
        (2, 20, 22),
    ]
    procs = _by_pid(res)
    completion_order = sorted(procs, key=lambda pid: procs[pid].completion_time)
    assert completion_order == [1, 0, 3, 2]
    assert procs[0].start_time == 0
    # P1 arrives at 1 but P0 keeps the CPU for its whole first quantum.
    assert procs[1].start_time == 2
    assert [procs[pid].waiting_time for pid in range(4)] == [9, 7, 12, 11]
    assert res.quantum == 2
    assert res.algorithm == "Round Robin (Q=2)"


def test_rr_arrivals_queue_ahead_of_preempted_process():
    procs = build_batch([(0, 4, 0), (1, 2, 0)])
    res = schedule_rr(procs, quantum=2)
    assert _spans(res) == [(0, 0, 2), (1, 2, 4), (0, 4, 6)]


def test_rr_rotates_between_ready_processes():
    procs = build_batch([(0, 3, 0), (0, 3, 0), (0, 3, 0)])
    res = schedule_rr(procs, quantum=1)
    units = [pid for s in res.timeline for pid in [s.pid] * s.duration]
    assert units == [0, 1, 2] * 3


def test_rr_single_process_slices_are_merged():
    res = schedule_rr(build_batch([(0, 5, 0)]), quantum=2)
    assert _spans(res) == [(0, 0, 5)]


def test_rr_requires_quantum(reference_batch):
    with pytest.raises(InputValidationError):
        schedule_rr(reference_batch)
    with pytest.raises(InputValidationError):
        schedule_rr(reference_batch, quantum=0)


def test_sjn_order(reference_batch):
    res = schedule_sjn(reference_batch)
    # Only P0 has arrived at t=0; at t=5 P1 has the shortest burst.
    assert _spans(res) == [(0, 0, 5), (1, 5, 8), (3, 8, 14), (2, 14, 22)]
    summary = res.summary
    assert summary.total_waiting == 21
    assert summary.avg_waiting == pytest.approx(5.25)
    assert summary.total_turnaround == 43
    assert summary.avg_turnaround == pytest.approx(10.75)
    assert res.quantum is None


def test_priority_static(reference_batch):
    res = schedule_priority(reference_batch)
    # P0 is the only candidate at t=0 even though later arrivals outrank it.
    assert res.timeline[0].pid == 0
    # P1 and P3 tie on priority 1 at t=5; P1 comes first in scan order.
    assert _spans(res) == [(0, 0, 5), (1, 5, 8), (3, 8, 14), (2, 14, 22)]


def test_priority_preemptive(reference_batch):
    res = schedule_priority_preemptive(reference_batch)
    assert _spans(res) == [(0, 0, 1), (1, 1, 4), (3, 4, 10), (0, 10, 14), (2, 14, 22)]
    procs = _by_pid(res)
    assert procs[0].start_time == 0
    assert procs[0].completion_time == 14
    assert procs[3].start_time == 4
    assert res.summary.total_waiting == 22


def test_priority_preemptive_tie_keeps_earlier_process():
    procs = build_batch([(0, 3, 1), (1, 2, 1)])
    res = schedule_priority_preemptive(procs)
    assert _spans(res) == [(0, 0, 3), (1, 3, 5)]


def test_srt(reference_batch):
    res = schedule_srt(reference_batch)
    assert _spans(res) == [(0, 0, 1), (1, 1, 4), (0, 4, 8), (3, 8, 14), (2, 14, 22)]
    procs = _by_pid(res)
    assert [procs[pid].waiting_time for pid in range(4)] == [3, 0, 12, 5]
    assert res.summary.avg_waiting == pytest.approx(5.0)


def test_srt_tie_uses_scan_order():
    procs = build_batch([(0, 2, 0), (0, 2, 0)])
    res = schedule_srt(procs)
    assert _spans(res) == [(0, 0, 2), (1, 2, 4)]


def test_scan_order_follows_arrival_not_pid():
    # P1 arrives first; at t=2 both are ready with equal bursts.
    procs = build_batch([(2, 3, 0), (0, 2, 0), (2, 3, 0)])
    res = schedule_sjn(procs)
    assert _spans(res) == [(1, 0, 2), (0, 2, 5), (2, 5, 8)]


def test_run_algorithm_dispatch(reference_batch):
    res = run_algorithm("SRT", reference_batch)
    assert res.algorithm == "Shortest Remaining Time"
    with pytest.raises(InputValidationError):
        run_algorithm("fcfs", reference_batch)


@pytest.mark.parametrize("quantum", [1, 2, 3])
@pytest.mark.parametrize("batch", BATCHES)
def test_rr_each_other_process_runs_at_most_once_between_turns(batch, quantum):
    res = schedule_rr(batch, quantum=quantum)
    pids = [s.pid for s in res.timeline if not s.idle]
    for pid in set(pids):
        turns = [i for i, p in enumerate(pids) if p == pid]
        for prev, nxt in zip(turns, turns[1:]):
            between = pids[prev + 1 : nxt]
            assert len(between) == len(set(between))

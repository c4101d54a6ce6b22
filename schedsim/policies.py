from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Sequence, Set

from .errors import InputValidationError
from .models import ProcessState


@dataclass(frozen=True)
class Dispatch:
    """
    A policy decision: run ``state`` for ``quantum`` units without re-selection.
    """

    state: ProcessState
    quantum: int


class Policy:
    """
    Ready-selection rule consumed by the simulation driver.

    ``ready`` is always the arrived, unfinished processes in scan order
    (arrival time, then pid). When several candidates tie on a policy's key,
    the first one in scan order wins.
    """

    key: str = ""
    name: str = ""
    preemptive: bool = False
    quantum: Optional[int] = None

    def start(self, arena: Sequence[ProcessState]) -> None:
        """Reset per-run state before a new simulation."""

    def select(self, time: int, ready: Sequence[ProcessState]) -> Optional[Dispatch]:
        raise NotImplementedError

    def release(self, time: int, state: ProcessState, ready: Sequence[ProcessState]) -> None:
        """Called after every slice, once ``time`` has moved past it."""


class _MinimumPolicy(Policy):
    """
    Pick the ready process with the smallest ``rank``.

    Full-burst policies run their choice to completion; per-unit policies
    run it for a single unit and choose again.
    """

    per_unit: bool = False

    def rank(self, state: ProcessState) -> int:
        raise NotImplementedError

    def select(self, time: int, ready: Sequence[ProcessState]) -> Optional[Dispatch]:
        if not ready:
            return None
        # min() keeps the first of equal keys, which is the scan-order tie-break.
        chosen = min(ready, key=self.rank)
        quantum = 1 if self.per_unit else chosen.remaining_time
        return Dispatch(chosen, quantum)


class ShortestJobNext(_MinimumPolicy):
    key = "sjn"
    name = "Shortest Job Next (non-preemptive)"

    def rank(self, state: ProcessState) -> int:
        return state.process.burst_time


class PriorityNonPreemptive(_MinimumPolicy):
    key = "priority"
    name = "Priority (non-preemptive)"

    def rank(self, state: ProcessState) -> int:
        return state.process.priority


class PriorityPreemptive(_MinimumPolicy):
    key = "ppriority"
    name = "Priority (preemptive)"
    preemptive = True
    per_unit = True

    def rank(self, state: ProcessState) -> int:
        return state.process.priority


class ShortestRemainingTime(_MinimumPolicy):
    key = "srt"
    name = "Shortest Remaining Time"
    preemptive = True
    per_unit = True

    def rank(self, state: ProcessState) -> int:
        return state.remaining_time


class RoundRobin(Policy):
    """
    FIFO ready queue with a fixed time slice.

    Processes that arrive while another one is running join the queue
    before the preempted process goes back to its tail.
    """

    key = "rr"
    preemptive = True

    def __init__(self, quantum: Optional[int]) -> None:
        if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
            raise InputValidationError(
                f"Round Robin requires a positive integer quantum, got {quantum!r}"
            )
        self.quantum = quantum
        self._queue: Deque[ProcessState] = deque()
        self._admitted: Set[int] = set()

    @property
    def name(self) -> str:
        return f"Round Robin (Q={self.quantum})"

    def start(self, arena: Sequence[ProcessState]) -> None:
        self._queue.clear()
        self._admitted.clear()

    def _admit(self, ready: Sequence[ProcessState]) -> None:
        for state in ready:
            if state.pid not in self._admitted:
                self._admitted.add(state.pid)
                self._queue.append(state)

    def select(self, time: int, ready: Sequence[ProcessState]) -> Optional[Dispatch]:
        self._admit(ready)
        if not self._queue:
            return None
        state = self._queue.popleft()
        return Dispatch(state, min(self.quantum, state.remaining_time))

    def release(self, time: int, state: ProcessState, ready: Sequence[ProcessState]) -> None:
        self._admit(ready)
        if not state.finished:
            self._queue.append(state)


POLICY_FACTORIES: dict[str, Callable[[Optional[int]], Policy]] = {
    "rr": RoundRobin,
    "sjn": lambda quantum=None: ShortestJobNext(),
    "priority": lambda quantum=None: PriorityNonPreemptive(),
    "ppriority": lambda quantum=None: PriorityPreemptive(),
    "srt": lambda quantum=None: ShortestRemainingTime(),
}


def make_policy(key: str, quantum: Optional[int] = None) -> Policy:
    key = key.lower()
    if key not in POLICY_FACTORIES:
        known = ", ".join(POLICY_FACTORIES)
        raise InputValidationError(f"Unknown algorithm '{key}' (choose from {known})")
    return POLICY_FACTORIES[key](quantum)

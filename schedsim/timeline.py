from __future__ import annotations

from typing import Iterator, List, Optional

from .errors import InvariantViolation
from .models import ScheduledSlice


class Timeline:
    """
    Ordered record of who held the CPU, from time 0 to the last completion.

    Consecutive units given to the same pid are merged into one slice, and
    idle gaps are stored as slices with ``pid=None`` so that the slices
    always tile ``[0, end)`` without holes or overlaps.
    """

    def __init__(self) -> None:
        self._slices: List[ScheduledSlice] = []

    @property
    def end(self) -> int:
        return self._slices[-1].end_time if self._slices else 0

    @property
    def slices(self) -> List[ScheduledSlice]:
        return list(self._slices)

    def record(self, pid: Optional[int], start_time: int, duration: int) -> None:
        if start_time != self.end:
            raise InvariantViolation(
                f"Slice for {pid!r} starts at {start_time}, timeline ends at {self.end}"
            )
        if duration <= 0:
            raise InvariantViolation(f"Slice for {pid!r} has non-positive duration {duration}")

        last = self._slices[-1] if self._slices else None
        if last is not None and last.pid == pid:
            last.end_time += duration
            return
        self._slices.append(ScheduledSlice(pid=pid, start_time=start_time, end_time=start_time + duration))

    def record_idle(self, start_time: int, until: int) -> None:
        self.record(None, start_time, until - start_time)

    def units(self) -> List[Optional[int]]:
        """
        Expand the slices into one entry per simulated time unit.
        """
        return list(iter_units(self._slices))

    def __len__(self) -> int:
        return len(self._slices)


def iter_units(slices: List[ScheduledSlice]) -> Iterator[Optional[int]]:
    for sl in slices:
        for _ in range(sl.duration):
            yield sl.pid


def busy_time(slices: List[ScheduledSlice]) -> int:
    return sum(sl.duration for sl in slices if not sl.idle)

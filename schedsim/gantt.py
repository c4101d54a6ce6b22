from __future__ import annotations

from typing import Dict, List, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice
from .timeline import iter_units


def _place_mark(marks: str, column: int, mark: str) -> str:
    # Right-align the mark on column, but never run into the previous one.
    start = max(column - len(mark) + 1, len(marks) + 1)
    return marks.ljust(start) + mark


def render_units(slices: List[ScheduledSlice]) -> str:
    """
    One label per simulated time unit, e.g. ``P0 P0 P1 -- P1``.
    """
    return " ".join("--" if pid is None else f"P{pid}" for pid in iter_units(slices))


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart, one character per time unit.
    """
    if not slices:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"

    for sl in slices:
        width = sl.duration
        if sl.idle:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += sl.label[:width].ljust(width)
        time_marks = _place_mark(time_marks, sl.end_time, str(sl.end_time))

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[Optional[int], str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"

    for sl in slices:
        # Two columns per unit leaves room for labels like "P12".
        width = 2 * sl.duration
        if sl.idle:
            timeline.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
            labels.append(sl.label[:width].ljust(width), style="bold")

        time_marks = _place_mark(time_marks, 2 * sl.end_time - 1, str(sl.end_time))

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks

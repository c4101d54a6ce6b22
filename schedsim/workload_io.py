from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .errors import InputValidationError
from .models import Process, build_batch, validate_batch


@dataclass
class Workload:
    processes: List[Process]
    quantum: Optional[int] = None


def load_workload(path: str | Path) -> Workload:
    """
    Load a workload from a JSON, CSV or plain-text file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)
    if suffix == ".txt":
        return _load_txt(path)

    raise InputValidationError(f"Unsupported workload format: {suffix} (use .json, .csv or .txt)")


def _load_json(path: Path) -> Workload:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InputValidationError(f"{path}: invalid JSON ({exc})") from exc

    quantum = None
    if isinstance(raw, dict):
        quantum = raw.get("quantum")
        if quantum is not None:
            quantum = _as_int(quantum, "quantum")
        raw = raw.get("processes")

    if not isinstance(raw, list):
        raise InputValidationError("JSON workload must be a list of process objects")

    processes = [_process_from_mapping(index, entry) for index, entry in enumerate(raw)]
    validate_batch(processes)
    return Workload(processes=processes, quantum=quantum)


def _load_csv(path: Path) -> Workload:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for index, row in enumerate(reader):
            processes.append(_process_from_mapping(index, row))
    validate_batch(processes)
    return Workload(processes=processes)


def _load_txt(path: Path) -> Workload:
    triples = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            try:
                triples.append(parse_triple(line))
            except InputValidationError as exc:
                raise InputValidationError(f"{path}:{lineno}: {exc}") from exc
    return Workload(processes=build_batch(triples))


def parse_triple(text: str) -> tuple[int, int, int]:
    """
    Parse an ``arrival,burst,priority`` line.
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 3:
        raise InputValidationError(f"Expected <arrival>,<burst>,<priority>, got {text!r}")
    arrival, burst, priority = (_as_int(part, "field") for part in parts)
    return arrival, burst, priority


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InputValidationError(f"Invalid {what}: {value!r}")
    # Fractional JSON numbers load as floats, which int() would truncate.
    if isinstance(value, float) and not value.is_integer():
        raise InputValidationError(f"Invalid {what}: {value!r} is not a whole number")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InputValidationError(f"Invalid {what}: {value!r}") from exc


def _process_from_mapping(index: int, mapping: Mapping[str, Any]) -> Process:
    if not isinstance(mapping, Mapping):
        raise InputValidationError(f"Invalid process entry: {mapping!r}")

    try:
        arrival_time = _as_int(mapping["arrival_time"], "arrival_time")
        burst_time = _as_int(mapping["burst_time"], "burst_time")
        priority = _as_int(mapping["priority"], "priority")
    except (KeyError, InputValidationError) as exc:
        raise InputValidationError(f"Invalid process entry: {mapping!r}") from exc

    pid_val = mapping.get("pid")
    pid = _as_int(pid_val, "pid") if pid_val not in (None, "") else index

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )

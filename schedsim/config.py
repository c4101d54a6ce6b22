from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import InputValidationError

DEFAULT_QUANTUM = 2

# Order in which "compare" and the interactive session report results.
DEFAULT_ALGORITHMS: Tuple[str, ...] = ("rr", "sjn", "priority", "ppriority", "srt")

QUANTUM_ALGORITHMS = frozenset({"rr"})


@dataclass(frozen=True)
class SimulationConfig:
    quantum: int = DEFAULT_QUANTUM
    algorithms: Tuple[str, ...] = DEFAULT_ALGORITHMS

    def __post_init__(self) -> None:
        if isinstance(self.quantum, bool) or not isinstance(self.quantum, int) or self.quantum <= 0:
            raise InputValidationError(f"Quantum must be a positive integer, got {self.quantum!r}")
        unknown = [a for a in self.algorithms if a not in DEFAULT_ALGORITHMS]
        if unknown:
            raise InputValidationError(
                f"Unknown algorithm(s): {', '.join(unknown)} (choose from {', '.join(DEFAULT_ALGORITHMS)})"
            )
        if not self.algorithms:
            raise InputValidationError("At least one algorithm must be selected")


def resolve_config(
    cli_quantum: Optional[int] = None,
    file_quantum: Optional[int] = None,
    algorithms: Optional[Sequence[str]] = None,
) -> SimulationConfig:
    """
    Merge quantum sources: command line, then workload file, then default.
    """
    if cli_quantum is not None:
        quantum = cli_quantum
    elif file_quantum is not None:
        quantum = file_quantum
    else:
        quantum = DEFAULT_QUANTUM

    names = tuple(a.lower() for a in algorithms) if algorithms else DEFAULT_ALGORITHMS
    return SimulationConfig(quantum=quantum, algorithms=names)

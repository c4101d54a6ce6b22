from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by schedsim."""


class InputValidationError(SchedulerError, ValueError):
    """
    The process batch, quantum or algorithm name is unusable.

    Raised before any simulation run starts, so no partial results exist.
    """


class InvariantViolation(SchedulerError, RuntimeError):
    """
    The driver or a policy broke one of its own guarantees.

    This is a defect, not a user error; callers should let it propagate.
    """

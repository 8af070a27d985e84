"""Exception types for the spark growth simulation."""

from typing import Optional


class SparkError(Exception):
    """Base class for all errors raised by a growth run."""


class InvalidConfigError(SparkError, ValueError):
    """Run parameters were rejected before the first tick."""


class GridSaturatedError(SparkError, RuntimeError):
    """
    Selection could not find a new active cell.

    Raised either when no active cell has a free in-bounds neighbor left
    (reason "exhausted"), or when the per-tick attempt cap ran out before a
    candidate was accepted (reason "attempt_cap").
    """

    def __init__(self, step: int, attempts: int, reason: str,
                 message: Optional[str] = None):
        self.step = step
        self.attempts = attempts
        self.reason = reason
        if message is None:
            message = (f"Grid saturated at step {step} after {attempts} "
                       f"attempts ({reason})")
        super().__init__(message)

"""Exception types raised by the swerve control core."""

import math
from typing import Iterable


class SwerveControlError(Exception):
    """Base class for swerve control errors."""


class DomainError(SwerveControlError, ValueError):
    """Raised when a kinematic input is NaN or infinite.

    The offending command must not be dispatched to hardware. Callers should
    substitute a zero/hold command instead.
    """


class UninitializedStateError(SwerveControlError, RuntimeError):
    """Raised when the pose estimator is read before it has been seeded.

    This indicates a programming error (broken initialization order), not a
    recoverable runtime condition.
    """


def require_finite(name: str, values: Iterable[float]) -> None:
    """Raise DomainError if any value is NaN or infinite.

    Args:
        name: Description of the input, used in the error message.
        values: Numbers to check.

    Raises:
        DomainError: If any value is not finite.
    """
    for value in values:
        if not math.isfinite(value):
            raise DomainError(f"{name} must be finite, got {value!r}")

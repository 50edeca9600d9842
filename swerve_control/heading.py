"""Heading normalization for the pose estimator.

Raw heading sensors disagree on units (degrees vs radians) and on sign
(NavX-style fused headings grow clockwise). The estimator and every consumer
of the field pose use a single convention:

    field heading = radians, counter-clockwise positive, wrapped to [-pi, pi)

Every raw sample goes through normalize_heading exactly once, so the
conversion lives in one place instead of being repeated (and negated) at each
call site.
"""

import math
import time
from typing import Callable, Optional

from . import config
from .errors import require_finite
from .geometry import wrap_angle
from .hardware import HeadingSource


def normalize_heading(
    raw: float,
    clockwise_positive: bool = config.HEADING_CLOCKWISE_POSITIVE,
    degrees: bool = config.HEADING_IN_DEGREES,
    drift_rate: float = config.HEADING_DRIFT_RATE,
    timestamp: float = 0.0,
) -> float:
    """Convert a raw heading reading to the field convention.

    Args:
        raw: Raw sensor reading (degrees or radians, per `degrees`)
        clockwise_positive: True if the sensor reports clockwise-positive angles
        degrees: True if `raw` and `drift_rate` are in degrees
        drift_rate: Additive drift compensation in raw units per second. The
            compensation term is drift_rate * timestamp, added before the sign
            flip. Leave at 0.0 unless measured on the actual sensor.
        timestamp: Seconds since the sensor was last zeroed (only used with drift_rate)

    Returns:
        Heading in radians, counter-clockwise positive, wrapped to [-pi, pi)

    Raises:
        DomainError: If the reading is NaN or infinite.
    """
    require_finite("heading sample", (raw,))

    value = raw + drift_rate * timestamp
    if degrees:
        value = math.radians(value)
    if clockwise_positive:
        value = -value
    return wrap_angle(value)


class HeadingNormalizer:
    """Reads a heading source and applies one fixed convention to every sample.

    Attributes:
        source: Raw heading source
        clockwise_positive: Sensor sign convention
        degrees: Sensor units
        drift_rate: Drift compensation (raw units per second), 0.0 disables it
    """

    def __init__(
        self,
        source: HeadingSource,
        clockwise_positive: bool = config.HEADING_CLOCKWISE_POSITIVE,
        degrees: bool = config.HEADING_IN_DEGREES,
        drift_rate: float = config.HEADING_DRIFT_RATE,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the normalizer.

        Args:
            source: Heading source to read from
            clockwise_positive: True if the source is clockwise-positive
            degrees: True if the source reports degrees
            drift_rate: Drift compensation rate, raw units per second
            clock: Monotonic time source (seconds); only needed with a nonzero
                drift_rate. Defaults to time.monotonic.
        """
        self.source = source
        self.clockwise_positive = clockwise_positive
        self.degrees = degrees
        self.drift_rate = drift_rate

        self._clock = clock if clock is not None else time.monotonic
        self._zero_time = self._clock()

    def get_heading(self) -> float:
        """Current field-convention heading (radians, CCW positive, wrapped)."""
        elapsed = self._clock() - self._zero_time if self.drift_rate else 0.0
        return normalize_heading(
            self.source.get_heading(),
            clockwise_positive=self.clockwise_positive,
            degrees=self.degrees,
            drift_rate=self.drift_rate,
            timestamp=elapsed,
        )

    def reset(self) -> None:
        """Re-zero the underlying sensor and restart drift compensation."""
        self.source.reset()
        self._zero_time = self._clock()

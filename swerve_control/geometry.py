"""Planar geometry value types for swerve kinematics and odometry.

All angles are in radians, counter-clockwise positive, and wrapped to
[-pi, pi). Robot frame: +x forward, +y left.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, TypeVar

NUM_MODULES = 4

T = TypeVar("T")


def wrap_angle(angle: float) -> float:
    """Wrap an angle to [-pi, pi).

    Args:
        angle: Angle in radians (any range)

    Returns:
        Equivalent angle in [-pi, pi)
    """
    wrapped = (angle + math.pi) % (2.0 * math.pi) - math.pi
    # Float rounding can land exactly on +pi
    if wrapped >= math.pi:
        wrapped -= 2.0 * math.pi
    return wrapped


def angle_difference(a: float, b: float) -> float:
    """Shortest signed angular difference a - b, in [-pi, pi)."""
    return wrap_angle(a - b)


def check_module_count(values: Sequence[T], name: str = "module array") -> Sequence[T]:
    """Validate that a per-module sequence has one entry per module.

    Raises:
        ValueError: If the sequence length is not NUM_MODULES.
    """
    if len(values) != NUM_MODULES:
        raise ValueError(f"{name} must have {NUM_MODULES} entries (FL, FR, BL, BR), got {len(values)}")
    return values


class Frame(Enum):
    """Reference frame of a chassis velocity."""

    ROBOT = "robot"
    FIELD = "field"


@dataclass(frozen=True)
class Translation:
    """2D point or offset (meters)."""

    x: float = 0.0
    y: float = 0.0

    def rotate_by(self, angle: float) -> "Translation":
        """Rotate counter-clockwise about the origin by angle (radians)."""
        c = math.cos(angle)
        s = math.sin(angle)
        return Translation(self.x * c - self.y * s, self.x * s + self.y * c)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def __add__(self, other: "Translation") -> "Translation":
        return Translation(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Translation") -> "Translation":
        return Translation(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class ChassisVelocity:
    """Chassis velocity command.

    Attributes:
        vx: Linear velocity along x (m/s)
        vy: Linear velocity along y (m/s)
        omega: Angular velocity (rad/s), counter-clockwise positive
        frame: Frame the linear components are expressed in
    """

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0
    frame: Frame = Frame.ROBOT


@dataclass(frozen=True)
class ModuleState:
    """Desired or measured module state: wheel speed (m/s) and steer angle (rad)."""

    speed: float = 0.0
    angle: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "angle", wrap_angle(self.angle))


@dataclass(frozen=True)
class ModulePosition:
    """Cumulative wheel travel (m) and current steer angle (rad) of one module."""

    distance: float = 0.0
    angle: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "angle", wrap_angle(self.angle))


@dataclass(frozen=True)
class Twist:
    """Chassis-frame displacement over one odometry step.

    Attributes:
        dx: Forward displacement (m)
        dy: Leftward displacement (m)
        dtheta: Rotation (rad), counter-clockwise positive
    """

    dx: float = 0.0
    dy: float = 0.0
    dtheta: float = 0.0


@dataclass(frozen=True)
class Pose:
    """Robot pose on the field: position (m) and heading (rad)."""

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "heading", wrap_angle(self.heading))

    @property
    def translation(self) -> Translation:
        return Translation(self.x, self.y)

    def with_heading(self, heading: float) -> "Pose":
        """Return a copy of this pose with a different heading."""
        return Pose(self.x, self.y, heading)

    def exp(self, twist: Twist) -> "Pose":
        """Apply a chassis-frame twist to this pose.

        Integrates motion along a constant-curvature arc (SE(2) exponential
        map), so a simultaneous translation and rotation over one step does
        not bias the position toward the starting heading:

            dx_arc = dx * sin(dθ)/dθ - dy * (1 - cos(dθ))/dθ
            dy_arc = dx * (1 - cos(dθ))/dθ + dy * sin(dθ)/dθ

        Args:
            twist: Displacement expressed in the robot frame at this pose

        Returns:
            New pose after applying the twist
        """
        dtheta = twist.dtheta
        sin_theta = math.sin(dtheta)
        cos_theta = math.cos(dtheta)

        if abs(dtheta) < 1e-9:
            # Taylor expansion around dθ = 0
            s = 1.0 - dtheta * dtheta / 6.0
            c = dtheta / 2.0
        else:
            s = sin_theta / dtheta
            c = (1.0 - cos_theta) / dtheta

        local = Translation(twist.dx * s - twist.dy * c, twist.dx * c + twist.dy * s)
        delta = local.rotate_by(self.heading)

        return Pose(self.x + delta.x, self.y + delta.y, self.heading + dtheta)

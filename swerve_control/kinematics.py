"""Swerve drive kinematic model.

This module converts between chassis velocities and the individual states of
four independently steered, independently driven modules.

For a module mounted at offset (x_i, y_i) from the robot center, rotating
about a center of rotation (c_x, c_y), the wheel velocity is the chassis
linear velocity plus the tangential velocity induced by rotation:

    v_ix = vx - omega * (y_i - c_y)
    v_iy = vy + omega * (x_i - c_x)

Stacking all four modules gives an 8x3 linear map M, so that
module_velocities = M @ [vx, vy, omega]. The inverse direction is
over-determined (8 equations, 3 unknowns) and is solved in the least-squares
sense with the Moore-Penrose pseudo-inverse of M.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from . import config
from .errors import DomainError, require_finite
from .geometry import (
    ChassisVelocity,
    Frame,
    ModulePosition,
    ModuleState,
    Translation,
    Twist,
    check_module_count,
)

logger = logging.getLogger(__name__)


class SwerveKinematics:
    """Forward and inverse kinematics for a four-module swerve drivetrain.

    Attributes:
        module_offsets: Module contact point offsets in canonical order (FL, FR, BL, BR)
        zero_velocity_epsilon: Speed below which a module holds its previous angle
    """

    def __init__(
        self,
        module_offsets: Sequence[Translation],
        zero_velocity_epsilon: float = config.ZERO_VELOCITY_EPSILON,
    ):
        """Initialize the kinematics from module mounting offsets.

        Args:
            module_offsets: Four module offsets from the robot rotation center,
                in canonical order (FL, FR, BL, BR).
            zero_velocity_epsilon: Module speed (m/s) below which the steer angle
                is held at its previous commanded value.

        Raises:
            ValueError: If there are not exactly four offsets.
            DomainError: If any offset is not finite.
        """
        check_module_count(module_offsets, "module_offsets")
        for offset in module_offsets:
            require_finite("module offset", (offset.x, offset.y))

        self.module_offsets: Tuple[Translation, ...] = tuple(module_offsets)
        self.zero_velocity_epsilon = zero_velocity_epsilon

        self._forward_matrix = self._build_forward_matrix(Translation())
        # Only the most recent off-center matrix is kept
        self._prev_center: Optional[Translation] = None
        self._prev_matrix: Optional[np.ndarray] = None
        self._inverse_matrix = np.linalg.pinv(self._forward_matrix)

        # Last commanded angle per module (held when commanded speed is zero)
        self._module_headings: List[float] = [0.0] * len(self.module_offsets)

    @classmethod
    def from_config(cls) -> "SwerveKinematics":
        """Build kinematics from the module offsets in swerve_control.config."""
        return cls([Translation(x, y) for x, y in config.MODULE_OFFSETS])

    def _build_forward_matrix(self, center_of_rotation: Translation) -> np.ndarray:
        """Build the 8x3 matrix mapping [vx, vy, omega] to module velocities."""
        rows = []
        for offset in self.module_offsets:
            rel = offset - center_of_rotation
            rows.append([1.0, 0.0, -rel.y])
            rows.append([0.0, 1.0, rel.x])

        return np.array(rows)

    def _matrix_for_center(self, center_of_rotation: Translation) -> np.ndarray:
        """Forward matrix for an off-center rotation, rebuilt only when the center changes."""
        if center_of_rotation != self._prev_center or self._prev_matrix is None:
            self._prev_matrix = self._build_forward_matrix(center_of_rotation)
            self._prev_center = center_of_rotation
        return self._prev_matrix

    def to_module_states(
        self,
        velocity: ChassisVelocity,
        center_of_rotation: Optional[Translation] = None,
    ) -> List[ModuleState]:
        """Compute the four module states for a robot-relative chassis velocity.

        A module whose velocity is (near) zero keeps its previously commanded
        angle with zero speed, so the wheels don't snap back to 0 rad whenever
        the robot stops.

        Args:
            velocity: Robot-frame chassis velocity (vx, vy in m/s, omega in rad/s)
            center_of_rotation: Point to rotate about, relative to the robot
                center. Defaults to the geometric center.

        Returns:
            List of ModuleState in canonical order (FL, FR, BL, BR)

        Raises:
            DomainError: If any velocity component or the center of rotation is
                NaN or infinite.
        """
        require_finite("chassis velocity", (velocity.vx, velocity.vy, velocity.omega))
        if velocity.frame is not Frame.ROBOT:
            raise ValueError("Chassis velocity must be robot-relative; convert with commands.to_chassis_velocity")
        if center_of_rotation is None:
            matrix = self._forward_matrix
        else:
            require_finite("center of rotation", (center_of_rotation.x, center_of_rotation.y))
            matrix = self._matrix_for_center(center_of_rotation)

        chassis = np.array([velocity.vx, velocity.vy, velocity.omega])
        module_velocities = (matrix @ chassis).reshape(-1, 2)

        states = []
        for i, (v_x, v_y) in enumerate(module_velocities):
            speed = math.hypot(v_x, v_y)
            if speed < self.zero_velocity_epsilon:
                states.append(ModuleState(0.0, self._module_headings[i]))
                continue

            angle = math.atan2(v_y, v_x)
            self._module_headings[i] = angle
            states.append(ModuleState(speed, angle))

        return states

    def _solve_chassis(self, vectors: Sequence[Tuple[float, float]]) -> np.ndarray:
        """Least-squares solve for [vx, vy, omega] from per-module (x, y) vectors."""
        module_vector = np.array(vectors, dtype=float).reshape(-1)
        return self._inverse_matrix @ module_vector

    def to_chassis_velocity(self, states: Sequence[ModuleState]) -> ChassisVelocity:
        """Compute the robot-relative chassis velocity from four module states.

        Exact for kinematically consistent states; a least-squares best fit
        otherwise (e.g. when one wheel slips).

        Args:
            states: Module states in canonical order

        Returns:
            Robot-frame chassis velocity

        Raises:
            DomainError: If any speed or angle is NaN or infinite.
        """
        check_module_count(states, "module states")
        require_finite("module states", [v for s in states for v in (s.speed, s.angle)])
        vectors = [(s.speed * math.cos(s.angle), s.speed * math.sin(s.angle)) for s in states]
        vx, vy, omega = self._solve_chassis(vectors)
        return ChassisVelocity(float(vx), float(vy), float(omega))

    def to_twist(
        self,
        start: Sequence[ModulePosition],
        end: Sequence[ModulePosition],
    ) -> Twist:
        """Compute the chassis displacement between two sets of module positions.

        Each module's distance delta is taken along its end angle and pushed
        through the same pseudo-inverse used for velocities; the result is a
        displacement rather than a velocity.

        Args:
            start: Module positions at the previous update
            end: Module positions now

        Returns:
            Robot-frame twist (dx, dy, dtheta)
        """
        check_module_count(start, "start positions")
        check_module_count(end, "end positions")

        vectors = []
        for before, after in zip(start, end):
            delta = after.distance - before.distance
            vectors.append((delta * math.cos(after.angle), delta * math.sin(after.angle)))

        dx, dy, dtheta = self._solve_chassis(vectors)
        return Twist(float(dx), float(dy), float(dtheta))

    @staticmethod
    def desaturate_wheel_speeds(states: Sequence[ModuleState], max_speed: float) -> List[ModuleState]:
        """Scale module speeds down uniformly so none exceeds max_speed.

        Angles are never changed and the ratio between any two speeds is
        preserved. No-op when every speed is already within the limit.

        Args:
            states: Module states in canonical order
            max_speed: Physical wheel speed ceiling (m/s), must be positive

        Returns:
            New list of (possibly scaled) module states

        Raises:
            ValueError: If there are not exactly four states.
            DomainError: If max_speed is not a finite positive number, or any
                module speed is NaN or infinite.
        """
        check_module_count(states, "module states")
        require_finite("module speeds", [s.speed for s in states])
        require_finite("max_speed", (max_speed,))
        if max_speed <= 0.0:
            raise DomainError(f"max_speed must be positive, got {max_speed!r}")

        peak = max((abs(s.speed) for s in states), default=0.0)
        if peak <= max_speed:
            return list(states)

        scale = max_speed / peak
        logger.debug(f"Desaturating wheel speeds: peak={peak:.3f} m/s, scale={scale:.3f}")
        return [ModuleState(s.speed * scale, s.angle) for s in states]

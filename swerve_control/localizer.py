"""Pose estimation for the swerve drivetrain.

This module tracks the robot's field pose by fusing wheel odometry with the
heading sensor:
- Module distance/angle deltas give the chassis translation (via kinematics)
- The heading sensor gives the chassis rotation (authoritative over the
  wheel-derived rotation, which drifts with wheel slip)
- Hard resets re-anchor the estimate (match start, driver re-zero, vision fix)

Headings passed in must already be in the field convention (radians, CCW
positive); see swerve_control.heading.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from .errors import UninitializedStateError, require_finite
from .geometry import ModulePosition, Pose, angle_difference, check_module_count, wrap_angle
from .kinematics import SwerveKinematics

logger = logging.getLogger(__name__)


@dataclass
class PoseEstimatorState:
    """Mutable estimator state, owned by a single SwervePoseEstimator.

    Attributes:
        pose: Current best-estimate field pose
        last_positions: Module positions at the previous update (odometry baseline)
        last_heading: Field heading at the previous update (radians)
        heading_offset: Added to every heading sample to get the field heading
    """

    pose: Optional[Pose] = None
    last_positions: List[ModulePosition] = field(default_factory=list)
    last_heading: float = 0.0
    heading_offset: float = 0.0


class SwervePoseEstimator:
    """Odometry + heading pose estimator for a four-module swerve drive.

    The heading offset is fixed at construction and at every reset so that
    the pose heading equals the requested pose heading at that moment. After
    that, each update's field heading is heading_sample + heading_offset.

    All public methods take the same lock, so a multi-threaded host gets
    consistent (untorn) reads. No atomicity is provided across calls.
    """

    def __init__(
        self,
        kinematics: SwerveKinematics,
        heading: float,
        module_positions: Sequence[ModulePosition],
        initial_pose: Optional[Pose] = None,
    ):
        """Seed the estimator (Uninitialized -> Tracking).

        Args:
            kinematics: Kinematics of the drivetrain being tracked
            heading: Initial heading sample (radians, field convention)
            module_positions: Initial module positions in canonical order
            initial_pose: Starting pose. Default: origin, heading 0.
        """
        self.kinematics = kinematics
        self._lock = threading.Lock()
        self._state = PoseEstimatorState()
        self.reset_position(heading, module_positions, initial_pose or Pose())

    def _require_pose(self) -> Pose:
        if self._state.pose is None:
            raise UninitializedStateError("Pose estimator read before it was seeded")
        return self._state.pose

    def update(self, heading: float, module_positions: Sequence[ModulePosition]) -> Pose:
        """Integrate one odometry step and return the new pose.

        Args:
            heading: Current heading sample (radians, field convention)
            module_positions: Current module positions in canonical order

        Returns:
            Updated field pose

        Raises:
            DomainError: If the heading is NaN or infinite.
            UninitializedStateError: If the estimator has no pose.
        """
        require_finite("heading sample", (heading,))
        check_module_count(module_positions, "module positions")

        with self._lock:
            state = self._state
            pose = self._require_pose()

            field_heading = wrap_angle(heading + state.heading_offset)
            twist = self.kinematics.to_twist(state.last_positions, module_positions)

            # Gyro rotation replaces wheel-derived rotation; shortest path across ±pi
            twist = replace(twist, dtheta=angle_difference(field_heading, state.last_heading))
            new_pose = pose.exp(twist).with_heading(field_heading)

            state.pose = new_pose
            state.last_positions = list(module_positions)
            state.last_heading = field_heading

            return new_pose

    def reset_position(
        self,
        heading: float,
        module_positions: Sequence[ModulePosition],
        pose: Pose,
    ) -> None:
        """Hard-reset the pose and the odometry baseline.

        The next update() differences against module_positions. The jump is
        discontinuous: anything derived from consecutive poses (velocity)
        is meaningless across a reset.

        Args:
            heading: Heading sample at the moment of reset (radians, field convention)
            module_positions: Module positions at the moment of reset
            pose: Pose the robot is known to be at
        """
        require_finite("heading sample", (heading,))
        require_finite("pose", (pose.x, pose.y, pose.heading))
        check_module_count(module_positions, "module positions")

        with self._lock:
            self._state.pose = pose
            self._state.last_positions = list(module_positions)
            self._state.last_heading = pose.heading
            self._state.heading_offset = angle_difference(pose.heading, heading)

        logger.info(f"Pose reset to x={pose.x:.3f} m, y={pose.y:.3f} m, heading={pose.heading:.3f} rad")

    def get_estimated_position(self) -> Pose:
        """Current pose estimate. No side effects."""
        with self._lock:
            return self._require_pose()

"""Swerve drivetrain: the piece the host scheduler talks to.

Owns the four module drivers, the heading source, the kinematics, the pose
estimator and the drive command translator, and wires them together:

    scheduler tick -> on_periodic() -> update_odometry()
    drive request  -> translate -> desaturate -> dispatch to modules
"""

import logging
import math
from typing import List, Optional, Sequence

from . import config
from .commands import DriveCommandTranslator, DriveOptions
from .errors import DomainError
from .geometry import ModulePosition, ModuleState, Pose, check_module_count, wrap_angle
from .hardware import HeadingSource, SwerveModuleIO
from .heading import HeadingNormalizer
from .kinematics import SwerveKinematics
from .localizer import SwervePoseEstimator

logger = logging.getLogger(__name__)


class Drivetrain:
    """Four-module swerve drivetrain with odometry.

    Implements the Periodic protocol: the host scheduler calls on_periodic()
    once per control cycle.

    Attributes:
        modules: Module drivers in canonical order (FL, FR, BL, BR)
        heading: Heading normalizer wrapping the raw heading source
        kinematics: Swerve kinematics for the module geometry
        odometer: Pose estimator
        translator: Drive command translator
        max_speed: Wheel speed ceiling used for desaturation (m/s)
        desired_velocity_average: |sum of commanded speeds| / 4 from the last dispatch
    """

    def __init__(
        self,
        modules: Sequence[SwerveModuleIO],
        heading_source: HeadingSource,
        kinematics: Optional[SwerveKinematics] = None,
        heading: Optional[HeadingNormalizer] = None,
        max_speed: float = config.MAX_SPEED_METERS_PER_SECOND,
        initial_pose: Optional[Pose] = None,
    ):
        """Initialize the drivetrain and seed the pose estimator.

        Args:
            modules: Four module drivers in canonical order
            heading_source: Raw heading sensor
            kinematics: Kinematics to use. Default: built from config.MODULE_OFFSETS.
            heading: Heading normalizer. Default: wraps heading_source with the
                convention from config.
            max_speed: Wheel speed ceiling (m/s)
            initial_pose: Starting field pose. Default: origin.
        """
        check_module_count(modules, "modules")
        self.modules: List[SwerveModuleIO] = list(modules)
        self.heading = heading or HeadingNormalizer(heading_source)
        self.kinematics = kinematics or SwerveKinematics.from_config()
        self.max_speed = max_speed

        self.odometer = SwervePoseEstimator(
            self.kinematics,
            self.get_heading(),
            self.get_module_positions(),
            initial_pose,
        )
        self.translator = DriveCommandTranslator(self.kinematics, self.odometer.get_estimated_position)

        self.desired_velocity_average: float = 0.0

    # ------------------------------------------------------------------
    # Scheduler hook
    # ------------------------------------------------------------------

    def on_periodic(self) -> None:
        """Called once per scheduler run."""
        self.update_odometry()

    # ------------------------------------------------------------------
    # Heading
    # ------------------------------------------------------------------

    def get_heading(self) -> float:
        """Field-convention heading from the sensor (radians, CCW positive)."""
        return self.heading.get_heading()

    def zero_heading(self) -> None:
        """Re-zero the heading sensor.

        The estimator keeps its pose; call zero_odometry() or
        set_field_position() afterwards to re-anchor it to the new zero.
        """
        self.heading.reset()
        logger.info("Heading sensor zeroed")

    # ------------------------------------------------------------------
    # Odometry
    # ------------------------------------------------------------------

    def get_module_positions(self) -> List[ModulePosition]:
        return [module.get_position() for module in self.modules]

    def get_module_states(self) -> List[ModuleState]:
        return [module.get_state() for module in self.modules]

    def update_odometry(self) -> Pose:
        """Feed the current heading and module positions to the estimator."""
        return self.odometer.update(self.get_heading(), self.get_module_positions())

    def get_field_position(self) -> Pose:
        return self.odometer.get_estimated_position()

    def get_odometry_yaw(self) -> float:
        """Estimated heading in degrees, wrapped to [-180, 180)."""
        heading = self.get_field_position().heading
        return math.degrees(wrap_angle(heading))

    def zero_odometry(self) -> None:
        """Reset the estimate to the origin (match start / driver re-zero)."""
        self.set_field_position(Pose())

    def set_field_position(self, pose: Pose) -> None:
        """Reset the estimate to a known field pose."""
        self.odometer.reset_position(self.get_heading(), self.get_module_positions(), pose)

    def apply_vision_pose(self, pose: Pose) -> None:
        """Re-anchor the estimate to an absolute observation (e.g. AprilTag fix).

        Uses the same heading convention as every other reset.
        """
        logger.debug(f"Applying vision pose: {pose}")
        self.set_field_position(pose)

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def drive(
        self,
        x_speed: float,
        y_speed: float,
        rot: float,
        options: DriveOptions = DriveOptions(),
    ) -> List[ModuleState]:
        """Drive the robot.

        A malformed request (NaN/inf) is never dispatched: the modules get a
        hold command (zero speed, current angles) instead.

        Args:
            x_speed: x speed (m/s), field or robot frame per options
            y_speed: y speed (m/s), field or robot frame per options
            rot: Angular speed (rad/s), counter-clockwise positive
            options: Field-relative flag and center of rotation

        Returns:
            The module states that were dispatched (after desaturation)
        """
        try:
            states = self.translator.translate(x_speed, y_speed, rot, options)
        except DomainError as e:
            logger.warning(f"Rejected drive command ({x_speed}, {y_speed}, {rot}): {e}")
            states = self.hold_states()

        return self.set_module_states(states)

    def hold_states(self) -> List[ModuleState]:
        """Zero-speed states that keep each module at its current steer angle."""
        return [ModuleState(0.0, position.angle) for position in self.get_module_positions()]

    def set_module_states(self, states: Sequence[ModuleState], closed_loop: bool = True) -> List[ModuleState]:
        """Desaturate and dispatch module states in canonical order.

        States with a NaN or infinite speed are replaced by a hold command.
        """
        check_module_count(states, "module states")
        try:
            states = SwerveKinematics.desaturate_wheel_speeds(states, self.max_speed)
        except DomainError as e:
            logger.warning(f"Rejected module states: {e}")
            states = self.hold_states()

        self.desired_velocity_average = abs(sum(s.speed for s in states)) / len(states)

        for module, state in zip(self.modules, states):
            module.set_desired_state(state, closed_loop)

        return states

    def get_actual_velocity_average(self) -> float:
        """Mean measured module speed (m/s)."""
        states = self.get_module_states()
        return abs(sum(s.speed for s in states)) / len(states)

    def stop(self) -> None:
        """Stop every module (rotation and translation)."""
        for module in self.modules:
            module.stop()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def log_absolute_angles(self) -> None:
        """Dump each module's raw absolute encoder reading at DEBUG level."""
        for name, module in zip(config.MODULE_NAMES, self.modules):
            logger.debug(f"{name} absolute angle: {module.get_absolute_angle():.4f}")

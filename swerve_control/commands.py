"""Drive command translation.

Converts a requested (x, y, rotation) motion, optionally field-relative and
optionally about an off-center point, into robot-frame module states.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from . import config
from .errors import require_finite
from .geometry import ChassisVelocity, Frame, ModuleState, Pose, Translation
from .kinematics import SwerveKinematics


@dataclass(frozen=True)
class DriveOptions:
    """How a drive request should be interpreted.

    Attributes:
        field_relative: If True, (x, y) speeds are in the field frame
        center_of_rotation: Point to rotate about, relative to the robot center.
            None means the geometric center.
    """

    field_relative: bool = config.DEFAULT_FIELD_RELATIVE
    center_of_rotation: Optional[Translation] = None


def to_chassis_velocity(
    x_speed: float,
    y_speed: float,
    rot: float,
    heading: float,
    options: DriveOptions = DriveOptions(),
) -> ChassisVelocity:
    """Build a robot-frame chassis velocity from a drive request.

    Field-relative requests are rotated by -heading into the robot frame:
        vx =  x * cos(h) + y * sin(h)
        vy = -x * sin(h) + y * cos(h)
    The rotation rate is frame-independent and passes through unchanged.

    Args:
        x_speed: Requested x speed (m/s)
        y_speed: Requested y speed (m/s)
        rot: Requested angular speed (rad/s), counter-clockwise positive
        heading: Current field heading (radians); ignored for robot-relative requests
        options: Drive options

    Returns:
        Robot-frame ChassisVelocity

    Raises:
        DomainError: If any input is NaN or infinite.
    """
    require_finite("drive request", (x_speed, y_speed, rot))

    if not options.field_relative:
        return ChassisVelocity(x_speed, y_speed, rot, Frame.ROBOT)

    require_finite("heading", (heading,))
    cos_h = math.cos(heading)
    sin_h = math.sin(heading)
    vx = x_speed * cos_h + y_speed * sin_h
    vy = -x_speed * sin_h + y_speed * cos_h
    return ChassisVelocity(vx, vy, rot, Frame.ROBOT)


class DriveCommandTranslator:
    """Stateless bridge from drive requests to module states.

    Reads the latest pose snapshot for field-relative requests and delegates
    to the kinematics.
    """

    def __init__(self, kinematics: SwerveKinematics, pose_source: Callable[[], Pose]):
        """
        Args:
            kinematics: Drivetrain kinematics
            pose_source: Returns the current pose snapshot (e.g.
                SwervePoseEstimator.get_estimated_position)
        """
        self.kinematics = kinematics
        self.pose_source = pose_source

    def translate(
        self,
        x_speed: float,
        y_speed: float,
        rot: float,
        options: DriveOptions = DriveOptions(),
    ) -> List[ModuleState]:
        """Convert a drive request into four (not yet desaturated) module states."""
        heading = self.pose_source().heading if options.field_relative else 0.0
        velocity = to_chassis_velocity(x_speed, y_speed, rot, heading, options)
        return self.kinematics.to_module_states(velocity, options.center_of_rotation)

"""Swerve Control - Kinematics and Odometry for Four-Module Swerve Drivetrains

Motion-control core of a four-wheel independent-steering ("swerve") robot.

## Architecture Overview

### Module Kinematics (kinematics.py)
Converts chassis velocities (vx, vy, omega) into four module (speed, angle)
targets and back.
- Arbitrary center of rotation (pivot turns)
- Least-squares inverse via the pseudo-inverse of the module geometry matrix
- Uniform wheel speed desaturation

### Pose Estimation (localizer.py)
Integrates module distance/angle deltas through the kinematics and takes
rotation from the heading sensor.
- Hard resets for match start, driver re-zero and vision corrections
- Shortest-path heading differences (no jump across ±180°)

### Drive Command Translation (commands.py)
Field-relative or robot-relative requests, optional center of rotation.

### Drivetrain (drivetrain.py)
Wires module drivers, heading sensor, kinematics, estimator and translator
together behind a single periodic hook for the host scheduler.

## Conventions

- Meters, m/s, radians, rad/s
- Counter-clockwise positive, angles wrapped to [-pi, pi)
- Robot frame: +x forward, +y left
- Module order everywhere: front-left, front-right, back-left, back-right

## Usage

```python
from swerve_control import Drivetrain, DriveOptions

drivetrain = Drivetrain(modules, heading_source)

# In the scheduler's periodic hook
drivetrain.on_periodic()

# Drive field-relative at 1 m/s along field +x while turning
drivetrain.drive(1.0, 0.0, 0.5, DriveOptions(field_relative=True))
```

Or run a simulated scenario from the command line:
```bash
python -m swerve_control --scenario square
```
"""

__version__ = "0.1.0"

from .commands import DriveCommandTranslator, DriveOptions, to_chassis_velocity
from .drivetrain import Drivetrain
from .errors import DomainError, SwerveControlError, UninitializedStateError
from .geometry import (
    ChassisVelocity,
    Frame,
    ModulePosition,
    ModuleState,
    Pose,
    Translation,
    Twist,
)
from .heading import HeadingNormalizer, normalize_heading
from .kinematics import SwerveKinematics
from .localizer import SwervePoseEstimator

__all__ = [
    "ChassisVelocity",
    "DomainError",
    "DriveCommandTranslator",
    "DriveOptions",
    "Drivetrain",
    "Frame",
    "HeadingNormalizer",
    "ModulePosition",
    "ModuleState",
    "Pose",
    "SwerveControlError",
    "SwerveKinematics",
    "SwervePoseEstimator",
    "Translation",
    "Twist",
    "UninitializedStateError",
    "normalize_heading",
    "to_chassis_velocity",
]

"""Interfaces to the collaborators the swerve core consumes or is consumed by.

Module drivers, the heading sensor driver, and the periodic scheduler live
outside this package. The core only depends on these protocols, so any
object with matching methods (a real driver, a simulator, a test double)
can be plugged in.

Sensor validity is the host's job: readings are assumed to be fresh and
valid. On a dropout the host should keep feeding its last good value.
"""

from typing import Protocol, runtime_checkable

from .geometry import ModulePosition, ModuleState


@runtime_checkable
class HeadingSource(Protocol):
    """Raw heading sensor (e.g. a fused IMU yaw)."""

    def get_heading(self) -> float:
        """Raw heading in the sensor's own units and sign convention."""
        ...

    def reset(self) -> None:
        """Re-zero the sensor's internal reference."""
        ...


@runtime_checkable
class SwerveModuleIO(Protocol):
    """One swerve module driver (drive motor, steer motor, absolute encoder)."""

    def get_position(self) -> ModulePosition:
        """Cumulative wheel travel (m) and current steer angle (rad)."""
        ...

    def get_state(self) -> ModuleState:
        """Measured wheel speed (m/s) and steer angle (rad)."""
        ...

    def get_absolute_angle(self) -> float:
        """Raw absolute encoder reading, for diagnostics only."""
        ...

    def set_desired_state(self, state: ModuleState, closed_loop: bool = True) -> None:
        """Command a wheel speed and steer angle."""
        ...

    def stop(self) -> None:
        """Stop both drive and steer motors."""
        ...


@runtime_checkable
class Periodic(Protocol):
    """Anything the host scheduler calls once per control cycle."""

    def on_periodic(self) -> None:
        ...

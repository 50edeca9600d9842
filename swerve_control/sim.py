"""Ideal swerve drivetrain simulation.

Stand-ins for the hardware collaborators, used by the scenario runner and
the tests:
- SimulatedSwerveModule: ideal servo, adopts commanded states instantly
- SimulatedHeadingSource: NavX-style fused heading (clockwise-positive degrees)
- SimulatedPlant: couples both and tracks the ground-truth pose
"""

import math
from typing import List, Optional

from .geometry import ModulePosition, ModuleState, Pose, Twist
from .kinematics import SwerveKinematics


class SimulatedSwerveModule:
    """Ideal swerve module: no servo lag, no wheel slip."""

    def __init__(self, name: str = "", encoder_offset: float = 0.0):
        """
        Args:
            name: Label used in diagnostics
            encoder_offset: Mounting offset of the absolute encoder (radians)
        """
        self.name = name
        self.encoder_offset = encoder_offset
        self.distance: float = 0.0
        self.state = ModuleState()
        self.closed_loop: bool = True

    def get_position(self) -> ModulePosition:
        return ModulePosition(self.distance, self.state.angle)

    def get_state(self) -> ModuleState:
        return self.state

    def get_absolute_angle(self) -> float:
        return self.state.angle + self.encoder_offset

    def set_desired_state(self, state: ModuleState, closed_loop: bool = True) -> None:
        self.state = state
        self.closed_loop = closed_loop

    def stop(self) -> None:
        self.state = ModuleState(0.0, self.state.angle)

    def step(self, dt: float) -> None:
        """Advance the wheel by one time step."""
        self.distance += self.state.speed * dt


class SimulatedHeadingSource:
    """Fused heading sensor reporting clockwise-positive degrees in [0, 360)."""

    def __init__(self, initial_degrees: float = 0.0):
        self.raw_degrees = initial_degrees

    def get_heading(self) -> float:
        return self.raw_degrees % 360.0

    def reset(self) -> None:
        self.raw_degrees = 0.0

    def advance(self, omega: float, dt: float) -> None:
        """Rotate by a counter-clockwise rate omega (rad/s) for dt seconds."""
        self.raw_degrees -= math.degrees(omega * dt)


class SimulatedPlant:
    """Four ideal modules and a gyro moving a rigid chassis.

    Attributes:
        modules: Simulated modules in canonical order
        gyro: Simulated heading source
        true_pose: Ground-truth pose (field frame)
    """

    def __init__(
        self,
        kinematics: SwerveKinematics,
        module_names: Optional[List[str]] = None,
        initial_pose: Optional[Pose] = None,
    ):
        names = module_names or ["FL", "FR", "BL", "BR"]
        self.kinematics = kinematics
        self.modules = [SimulatedSwerveModule(name) for name in names]
        self.gyro = SimulatedHeadingSource()
        self.true_pose = initial_pose or Pose()

    def step(self, dt: float) -> Pose:
        """Advance the plant by dt seconds using the currently commanded states.

        Returns:
            Ground-truth pose after the step
        """
        velocity = self.kinematics.to_chassis_velocity([m.get_state() for m in self.modules])
        twist = Twist(velocity.vx * dt, velocity.vy * dt, velocity.omega * dt)
        self.true_pose = self.true_pose.exp(twist)

        self.gyro.advance(velocity.omega, dt)
        for module in self.modules:
            module.step(dt)

        return self.true_pose

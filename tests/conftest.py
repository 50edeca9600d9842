"""Shared fixtures for swerve_control tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from swerve_control.drivetrain import Drivetrain
from swerve_control.geometry import Translation
from swerve_control.kinematics import SwerveKinematics
from swerve_control.sim import SimulatedPlant

OFFSET = 0.3


@pytest.fixture
def offsets():
    """±0.3 m square geometry in canonical order (FL, FR, BL, BR)."""
    return [
        Translation(OFFSET, OFFSET),
        Translation(OFFSET, -OFFSET),
        Translation(-OFFSET, OFFSET),
        Translation(-OFFSET, -OFFSET),
    ]


@pytest.fixture
def kinematics(offsets):
    return SwerveKinematics(offsets)


@pytest.fixture
def plant(offsets):
    return SimulatedPlant(SwerveKinematics(offsets))


@pytest.fixture
def drivetrain(plant, kinematics):
    return Drivetrain(plant.modules, plant.gyro, kinematics=kinematics)

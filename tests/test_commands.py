"""Tests for drive command translation."""

import math

import pytest

from swerve_control.commands import DriveCommandTranslator, DriveOptions, to_chassis_velocity
from swerve_control.errors import DomainError
from swerve_control.geometry import Frame, Pose, Translation


def test_robot_relative_passes_through():
    velocity = to_chassis_velocity(1.0, -0.5, 0.3, heading=1.2, options=DriveOptions(field_relative=False))

    assert (velocity.vx, velocity.vy, velocity.omega) == (1.0, -0.5, 0.3)
    assert velocity.frame is Frame.ROBOT


def test_field_relative_at_zero_heading_is_unchanged():
    velocity = to_chassis_velocity(1.0, 0.5, 0.2, heading=0.0, options=DriveOptions(field_relative=True))

    assert velocity.vx == pytest.approx(1.0)
    assert velocity.vy == pytest.approx(0.5)
    assert velocity.omega == 0.2


def test_field_relative_rotates_by_negative_heading():
    # Robot faces field +y; moving along field +x means moving to the robot's right
    velocity = to_chassis_velocity(1.0, 0.0, 0.7, heading=math.pi / 2, options=DriveOptions(field_relative=True))

    assert velocity.vx == pytest.approx(0.0, abs=1e-12)
    assert velocity.vy == pytest.approx(-1.0)
    assert velocity.omega == 0.7
    assert velocity.frame is Frame.ROBOT


def test_field_relative_preserves_magnitude():
    velocity = to_chassis_velocity(0.6, -0.8, 0.0, heading=2.3)

    assert math.hypot(velocity.vx, velocity.vy) == pytest.approx(1.0)


def test_default_options_are_field_relative():
    assert DriveOptions().field_relative is True
    assert DriveOptions().center_of_rotation is None


@pytest.mark.parametrize("args", [(float("nan"), 0.0, 0.0), (0.0, float("inf"), 0.0), (0.0, 0.0, float("nan"))])
def test_non_finite_request_raises(args):
    with pytest.raises(DomainError):
        to_chassis_velocity(*args, heading=0.0)


def test_non_finite_heading_raises_only_when_field_relative():
    with pytest.raises(DomainError):
        to_chassis_velocity(1.0, 0.0, 0.0, heading=float("nan"), options=DriveOptions(field_relative=True))

    velocity = to_chassis_velocity(1.0, 0.0, 0.0, heading=float("nan"), options=DriveOptions(field_relative=False))
    assert velocity.vx == 1.0


class TestTranslator:
    def test_translation_scenario(self, kinematics):
        translator = DriveCommandTranslator(kinematics, lambda: Pose())
        states = translator.translate(1.0, 0.0, 0.0, DriveOptions(field_relative=False))

        assert [s.speed for s in states] == pytest.approx([1.0] * 4)
        assert [s.angle for s in states] == pytest.approx([0.0] * 4)

    def test_rotation_scenario(self, kinematics):
        translator = DriveCommandTranslator(kinematics, lambda: Pose())
        states = translator.translate(0.0, 0.0, 1.0, DriveOptions(field_relative=False))

        expected_speed = 1.0 * math.sqrt(0.3 ** 2 + 0.3 ** 2)
        assert [s.speed for s in states] == pytest.approx([expected_speed] * 4)
        # Counter-clockwise: front-left wheel points back-left, front-right points front-left
        assert states[0].angle == pytest.approx(3 * math.pi / 4)
        assert states[1].angle == pytest.approx(math.pi / 4)

    def test_uses_latest_heading(self, kinematics):
        pose = {"current": Pose()}
        translator = DriveCommandTranslator(kinematics, lambda: pose["current"])

        pose["current"] = Pose(0.0, 0.0, math.pi / 2)
        states = translator.translate(1.0, 0.0, 0.0, DriveOptions(field_relative=True))

        assert [s.angle for s in states] == pytest.approx([-math.pi / 2] * 4)

    def test_forwards_center_of_rotation(self, kinematics):
        translator = DriveCommandTranslator(kinematics, lambda: Pose())
        options = DriveOptions(field_relative=False, center_of_rotation=Translation(0.3, 0.3))
        states = translator.translate(0.0, 0.0, 1.0, options)

        assert states[0].speed == pytest.approx(0.0)
        assert states[3].speed == pytest.approx(0.6 * math.sqrt(2))

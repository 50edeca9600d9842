"""Tests for swerve module kinematics."""

import math

import pytest

from swerve_control.errors import DomainError
from swerve_control.geometry import ChassisVelocity, Frame, ModulePosition, ModuleState, Translation
from swerve_control.kinematics import SwerveKinematics

RADIUS = math.hypot(0.3, 0.3)


def test_pure_translation_gives_equal_states(kinematics):
    states = kinematics.to_module_states(ChassisVelocity(1.0, 0.0, 0.0))

    for state in states:
        assert state.speed == pytest.approx(1.0)
        assert state.angle == pytest.approx(0.0)


@pytest.mark.parametrize("vx, vy", [(0.5, 0.5), (-1.2, 0.3), (0.0, -2.0)])
def test_any_translation_without_rotation_gives_equal_states(kinematics, vx, vy):
    states = kinematics.to_module_states(ChassisVelocity(vx, vy, 0.0))

    assert len({round(s.speed, 9) for s in states}) == 1
    assert len({round(s.angle, 9) for s in states}) == 1
    assert states[0].speed == pytest.approx(math.hypot(vx, vy))
    assert states[0].angle == pytest.approx(math.atan2(vy, vx))


def test_pure_rotation_is_tangential(kinematics, offsets):
    states = kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0))

    expected_angles = [3 * math.pi / 4, math.pi / 4, -3 * math.pi / 4, -math.pi / 4]
    for state, offset, expected in zip(states, offsets, expected_angles):
        assert state.speed == pytest.approx(1.0 * RADIUS)
        assert state.angle == pytest.approx(expected)
        # Perpendicular to the radius vector
        direction = (math.cos(state.angle), math.sin(state.angle))
        assert direction[0] * offset.x + direction[1] * offset.y == pytest.approx(0.0, abs=1e-12)


def test_rotation_speeds_proportional_to_radius():
    kinematics = SwerveKinematics(
        [Translation(0.5, 0.2), Translation(0.5, -0.2), Translation(-0.1, 0.2), Translation(-0.1, -0.2)]
    )
    omega = 2.0
    states = kinematics.to_module_states(ChassisVelocity(0.0, 0.0, omega))

    for state, offset in zip(states, kinematics.module_offsets):
        assert state.speed == pytest.approx(omega * offset.norm())


def test_center_of_rotation_at_front_left_module(kinematics):
    states = kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0), Translation(0.3, 0.3))

    fl, fr, bl, br = states
    assert fl.speed == pytest.approx(0.0)
    assert fl.angle == pytest.approx(0.0)
    assert fr.speed == pytest.approx(0.6)
    assert fr.angle == pytest.approx(0.0)
    assert bl.speed == pytest.approx(0.6)
    assert bl.angle == pytest.approx(-math.pi / 2)
    assert br.speed == pytest.approx(0.6 * math.sqrt(2))
    assert br.angle == pytest.approx(-math.pi / 4)


def test_zero_velocity_holds_previous_angle(kinematics):
    initial = kinematics.to_module_states(ChassisVelocity())
    assert all(s.speed == 0.0 and s.angle == 0.0 for s in initial)

    kinematics.to_module_states(ChassisVelocity(0.0, 1.0, 0.0))
    held = kinematics.to_module_states(ChassisVelocity())

    for state in held:
        assert state.speed == 0.0
        assert state.angle == pytest.approx(math.pi / 2)


@pytest.mark.parametrize(
    "velocity",
    [
        ChassisVelocity(float("nan"), 0.0, 0.0),
        ChassisVelocity(0.0, float("inf"), 0.0),
        ChassisVelocity(0.0, 0.0, -float("inf")),
    ],
)
def test_non_finite_velocity_raises(kinematics, velocity):
    with pytest.raises(DomainError):
        kinematics.to_module_states(velocity)


def test_non_finite_center_of_rotation_raises(kinematics):
    with pytest.raises(DomainError):
        kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0), Translation(float("nan"), 0.0))


def test_field_frame_velocity_rejected(kinematics):
    with pytest.raises(ValueError):
        kinematics.to_module_states(ChassisVelocity(1.0, 0.0, 0.0, Frame.FIELD))


def test_domain_error_is_a_value_error():
    assert issubclass(DomainError, ValueError)


def test_wrong_module_count_rejected():
    with pytest.raises(ValueError):
        SwerveKinematics([Translation(0.3, 0.3)] * 3)


@pytest.mark.parametrize(
    "velocity",
    [
        ChassisVelocity(1.0, 0.0, 0.0),
        ChassisVelocity(0.4, -0.7, 0.0),
        ChassisVelocity(0.0, 0.0, 1.5),
        ChassisVelocity(1.1, 0.6, -0.8),
    ],
)
def test_round_trip(kinematics, velocity):
    result = kinematics.to_chassis_velocity(kinematics.to_module_states(velocity))

    assert result.vx == pytest.approx(velocity.vx, abs=1e-9)
    assert result.vy == pytest.approx(velocity.vy, abs=1e-9)
    assert result.omega == pytest.approx(velocity.omega, abs=1e-9)


def test_inverse_is_least_squares_for_inconsistent_states(kinematics):
    # One wheel slipping: three modules say 1 m/s forward, one says 2 m/s
    states = [ModuleState(1.0, 0.0)] * 3 + [ModuleState(2.0, 0.0)]
    result = kinematics.to_chassis_velocity(states)

    assert result.vx == pytest.approx(1.25)
    assert result.vy == pytest.approx(0.0, abs=1e-12)


def test_to_twist_sideways(kinematics):
    start = [ModulePosition(0.0, math.pi / 2)] * 4
    end = [ModulePosition(0.25, math.pi / 2)] * 4
    twist = kinematics.to_twist(start, end)

    assert twist.dx == pytest.approx(0.0, abs=1e-12)
    assert twist.dy == pytest.approx(0.25)
    assert twist.dtheta == pytest.approx(0.0, abs=1e-12)


def test_to_twist_rotation(kinematics):
    arc = 0.1 * RADIUS
    angles = [3 * math.pi / 4, math.pi / 4, -3 * math.pi / 4, -math.pi / 4]
    start = [ModulePosition(0.0, a) for a in angles]
    end = [ModulePosition(arc, a) for a in angles]
    twist = kinematics.to_twist(start, end)

    assert twist.dtheta == pytest.approx(0.1)
    assert twist.dx == pytest.approx(0.0, abs=1e-12)


class TestDesaturate:
    def test_scales_down_to_ceiling(self):
        states = [ModuleState(5.0, 0.1), ModuleState(-2.5, 0.2), ModuleState(1.0, -0.3), ModuleState(0.0, 1.0)]
        result = SwerveKinematics.desaturate_wheel_speeds(states, 4.5)

        assert [s.speed for s in result] == pytest.approx([4.5, -2.25, 0.9, 0.0])
        assert [s.angle for s in result] == [s.angle for s in states]
        assert max(abs(s.speed) for s in result) <= 4.5 + 1e-12

    def test_preserves_ratios(self):
        states = [ModuleState(6.0, 0.0), ModuleState(3.0, 0.0), ModuleState(-1.5, 0.0), ModuleState(4.0, 0.0)]
        result = SwerveKinematics.desaturate_wheel_speeds(states, 2.0)

        for a, b in [(0, 1), (1, 2), (2, 3)]:
            assert result[a].speed / result[b].speed == pytest.approx(states[a].speed / states[b].speed)

    def test_noop_within_ceiling(self):
        states = [ModuleState(1.0, 0.5), ModuleState(-4.5, 0.0), ModuleState(2.0, 0.0), ModuleState(0.0, 0.0)]
        result = SwerveKinematics.desaturate_wheel_speeds(states, 4.5)

        assert result == states

    @pytest.mark.parametrize("max_speed", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_ceiling(self, max_speed):
        with pytest.raises(DomainError):
            SwerveKinematics.desaturate_wheel_speeds([ModuleState(1.0, 0.0)] * 4, max_speed)

    @pytest.mark.parametrize("index", [0, 2])
    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_speed_rejected(self, index, bad):
        states = [ModuleState(5.0, 0.0), ModuleState(1.0, 0.0), ModuleState(1.0, 0.0), ModuleState(1.0, 0.0)]
        states[index] = ModuleState(bad, 0.0)

        with pytest.raises(DomainError):
            SwerveKinematics.desaturate_wheel_speeds(states, 4.5)

    def test_wrong_count_rejected(self):
        with pytest.raises(ValueError):
            SwerveKinematics.desaturate_wheel_speeds([ModuleState(1.0, 0.0)] * 3, 4.5)


@pytest.mark.parametrize(
    "bad_state",
    [ModuleState(float("nan"), 0.0), ModuleState(float("inf"), 0.0), ModuleState(1.0, float("nan"))],
)
def test_to_chassis_velocity_rejects_non_finite_states(kinematics, bad_state):
    states = [ModuleState(1.0, 0.0)] * 3 + [bad_state]

    with pytest.raises(DomainError):
        kinematics.to_chassis_velocity(states)


def test_center_of_rotation_cache_stays_bounded(kinematics):
    for i in range(5000):
        kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0), Translation(0.3, i * 1e-4))

    assert kinematics._prev_center == Translation(0.3, 4999 * 1e-4)
    assert not any(isinstance(v, dict) for v in vars(kinematics).values())

    # Switching back and forth still gives the right matrix for each center
    fl = kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0), Translation(0.3, 0.3))[0]
    assert fl.speed == pytest.approx(0.0)
    fr = kinematics.to_module_states(ChassisVelocity(0.0, 0.0, 1.0), Translation(0.3, -0.3))[1]
    assert fr.speed == pytest.approx(0.0)

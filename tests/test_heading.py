"""Tests for heading normalization."""

import math

import pytest

from swerve_control.errors import DomainError
from swerve_control.heading import HeadingNormalizer, normalize_heading
from swerve_control.sim import SimulatedHeadingSource


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0.0, 0.0),
        (90.0, -math.pi / 2),
        (270.0, math.pi / 2),
        (-45.0, math.pi / 4),
        (720.0 + 10.0, math.radians(-10.0)),
    ],
)
def test_clockwise_degrees(raw, expected):
    assert normalize_heading(raw, clockwise_positive=True, degrees=True) == pytest.approx(expected)


def test_counter_clockwise_radians_is_only_wrapped():
    assert normalize_heading(0.5, clockwise_positive=False, degrees=False) == pytest.approx(0.5)
    assert normalize_heading(3 * math.pi / 2, clockwise_positive=False, degrees=False) == pytest.approx(
        -math.pi / 2
    )


def test_result_is_wrapped():
    for raw in range(-720, 721, 15):
        value = normalize_heading(float(raw))
        assert -math.pi <= value < math.pi


def test_drift_compensation():
    value = normalize_heading(0.0, clockwise_positive=True, degrees=True, drift_rate=0.009, timestamp=1000.0)

    assert value == pytest.approx(-math.radians(9.0))


def test_non_finite_rejected():
    with pytest.raises(DomainError):
        normalize_heading(float("nan"))


class TestHeadingNormalizer:
    def test_reads_source_with_fixed_convention(self):
        source = SimulatedHeadingSource(initial_degrees=30.0)
        normalizer = HeadingNormalizer(source, clockwise_positive=True, degrees=True)

        assert normalizer.get_heading() == pytest.approx(math.radians(-30.0))

    def test_reset_zeros_source(self):
        source = SimulatedHeadingSource(initial_degrees=30.0)
        normalizer = HeadingNormalizer(source)
        normalizer.reset()

        assert source.get_heading() == 0.0
        assert normalizer.get_heading() == 0.0

    def test_drift_uses_time_since_reset(self):
        now = {"t": 100.0}
        source = SimulatedHeadingSource()
        normalizer = HeadingNormalizer(
            source, clockwise_positive=True, degrees=True, drift_rate=1.0, clock=lambda: now["t"]
        )

        now["t"] = 110.0
        assert normalizer.get_heading() == pytest.approx(math.radians(-10.0))

        normalizer.reset()
        assert normalizer.get_heading() == pytest.approx(0.0)

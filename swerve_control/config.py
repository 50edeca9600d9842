"""Configuration parameters for the swerve control system.

This module centralizes all configuration parameters including:
- Physical drivetrain geometry and speed limits
- Heading sensor conventions
- Control loop timing
- Visualization and terminal settings

All parameters are documented with their purpose, units, and origin.
"""

# ============================================================================
# Physical Drivetrain Parameters
# ============================================================================

MODULE_X_OFFSET = 0.3
"""Forward/backward distance from the rotation center to each module contact point (meters).
Fixed by chassis design (square frame, modules at the corners)."""

MODULE_Y_OFFSET = 0.3
"""Left/right distance from the rotation center to each module contact point (meters).
Fixed by chassis design."""

MODULE_NAMES = ("FL", "FR", "BL", "BR")
"""Canonical module order: front-left, front-right, back-left, back-right.

Every per-module array in the package (offsets, commanded states, measured
positions, CSV columns) follows this order.
"""

MODULE_OFFSETS = (
    (MODULE_X_OFFSET, MODULE_Y_OFFSET),    # FL
    (MODULE_X_OFFSET, -MODULE_Y_OFFSET),   # FR
    (-MODULE_X_OFFSET, MODULE_Y_OFFSET),   # BL
    (-MODULE_X_OFFSET, -MODULE_Y_OFFSET),  # BR
)
"""Module (x, y) offsets in the robot frame (+x forward, +y left), canonical order."""

MAX_SPEED_METERS_PER_SECOND = 4.5
"""Maximum wheel linear speed (m/s). Hardware limit of the drive motors.

Commanded module states are uniformly scaled down so that no module exceeds
this value (see SwerveKinematics.desaturate_wheel_speeds).
"""

ZERO_VELOCITY_EPSILON = 1e-9
"""Module velocity magnitude below which the steer angle is held (m/s).

A module asked to move slower than this keeps its previously commanded angle
instead of snapping to atan2(0, 0) = 0.
"""


# ============================================================================
# Heading Sensor Convention
# ============================================================================

HEADING_CLOCKWISE_POSITIVE = True
"""Whether the raw heading source reports clockwise-positive angles.

NavX-style fused headings increase clockwise. The estimator works in a
counter-clockwise-positive field frame, so raw values are negated once in
swerve_control.heading.normalize_heading.
"""

HEADING_IN_DEGREES = True
"""Whether the raw heading source reports degrees (True) or radians (False)."""

HEADING_DRIFT_RATE = 0.0
"""Additive drift compensation applied to the raw heading (raw units per second).

Origin: older drivetrain code added 0.009 deg/s of elapsed time to the raw yaw.
That term compensates one specific sensor's drift and has not been
characterized on current hardware, so it is disabled (0.0).
Set to the measured drift rate after a stationary drift test.
"""


# ============================================================================
# Control Loop
# ============================================================================

CONTROL_PERIOD_SECONDS = 0.02
"""Scheduler period (seconds). One pose-estimator update per period (50 Hz)."""

DEFAULT_FIELD_RELATIVE = True
"""Default drive mode: field-relative translation commands."""


# ============================================================================
# Simulation
# ============================================================================

SIM_DURATION_SCALE = 1.0
"""Multiplier applied to every scenario segment duration (dimensionless)."""


# ============================================================================
# Visualization Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary color - used for estimated trajectory and measurements."""

PLOT_BLUE = "#2374f7"
"""Secondary color - used for reference and commanded values."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides, grids, and secondary elements."""

# Terminal color codes (ANSI escape sequences)
TERM_ORANGE = "\033[38;2;247;72;35m"
"""Terminal color code for orange (RGB: 247, 72, 35)."""

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""

"""
Scenario runner for the swerve control core.

This module plays the role of the host scheduler: it ticks a Drivetrain at a
fixed control period against a simulated plant, issues a scripted sequence of
drive requests, and logs poses and module states to CSV files.
"""

import argparse
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .commands import DriveOptions
from .config import CONTROL_PERIOD_SECONDS, SIM_DURATION_SCALE, TERM_BLUE, TERM_ORANGE, TERM_RESET
from .data_collector import DataCollector
from .drivetrain import Drivetrain
from .geometry import Pose, Translation
from .kinematics import SwerveKinematics
from .sim import SimulatedPlant


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        # Repeated calls must not stack console handlers
        if any(isinstance(h.formatter, CustomFormatter) for h in logger.handlers):
            return
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)


@dataclass(frozen=True)
class Segment:
    """One scripted drive request held for a fixed duration.

    Attributes:
        duration: How long to hold the request (seconds)
        x_speed: x speed (m/s)
        y_speed: y speed (m/s)
        rot: Angular speed (rad/s)
        options: Drive options (field-relative flag, center of rotation)
    """

    duration: float
    x_speed: float = 0.0
    y_speed: float = 0.0
    rot: float = 0.0
    options: DriveOptions = DriveOptions()


SCENARIOS: Dict[str, List[Segment]] = {
    # Field-relative square while spinning: exercises the frame rotation
    "square": [
        Segment(2.0, 1.0, 0.0, 0.5),
        Segment(2.0, 0.0, 1.0, 0.5),
        Segment(2.0, -1.0, 0.0, 0.5),
        Segment(2.0, 0.0, -1.0, 0.5),
    ],
    # Rotate in place past ±180°
    "spin": [
        Segment(4.0, 0.0, 0.0, math.pi / 2.0),
    ],
    # Pivot about the front-left module
    "pivot": [
        Segment(
            3.0, 0.0, 0.0, 1.0,
            DriveOptions(field_relative=False, center_of_rotation=Translation(0.3, 0.3)),
        ),
    ],
}


@dataclass
class RunResult:
    """Summary of a scenario run."""

    ticks: int
    estimated_pose: Pose
    true_pose: Pose
    poses: List[Pose] = field(default_factory=list)

    @property
    def position_error(self) -> float:
        """Final distance between estimated and true position (m)."""
        return math.hypot(
            self.estimated_pose.x - self.true_pose.x, self.estimated_pose.y - self.true_pose.y
        )


def run_scenario(
    segments: Sequence[Segment],
    period: float = CONTROL_PERIOD_SECONDS,
    data_collector: Optional[DataCollector] = None,
    kinematics: Optional[SwerveKinematics] = None,
) -> RunResult:
    """Run scripted drive segments against a simulated drivetrain.

    Each tick: odometry update (scheduler hook), drive request, plant step.

    Args:
        segments: Drive requests to play back in order
        period: Control period (seconds)
        data_collector: Optional CSV logger (must already be set up)
        kinematics: Kinematics shared by plant and drivetrain. Default: from config.

    Returns:
        RunResult with the final estimated and true poses
    """
    kinematics = kinematics or SwerveKinematics.from_config()
    plant = SimulatedPlant(SwerveKinematics(kinematics.module_offsets))
    drivetrain = Drivetrain(plant.modules, plant.gyro, kinematics=kinematics)

    poses: List[Pose] = []
    ticks = 0
    for segment in segments:
        n_ticks = int(round(segment.duration * SIM_DURATION_SCALE / period))
        logging.debug(f"Segment {segment} for {n_ticks} ticks")

        for _ in range(n_ticks):
            timestamp = ticks * period
            pose = drivetrain.update_odometry()
            states = drivetrain.drive(segment.x_speed, segment.y_speed, segment.rot, segment.options)
            plant.step(period)
            poses.append(pose)

            if data_collector is not None:
                data_collector.log_pose(timestamp, pose, plant.true_pose)
                data_collector.log_module_states(timestamp, states)
                data_collector.log_command(
                    timestamp, segment.x_speed, segment.y_speed, segment.rot, segment.options.field_relative
                )
            ticks += 1

    drivetrain.stop()
    final_pose = drivetrain.update_odometry()
    poses.append(final_pose)

    return RunResult(ticks=ticks, estimated_pose=final_pose, true_pose=plant.true_pose, poses=poses)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point: run a named scenario and report the result."""
    parser = argparse.ArgumentParser(description="Run a scripted swerve drive scenario in simulation")
    parser.add_argument(
        "--scenario", choices=sorted(SCENARIOS), default="square", help="Scenario to run (default: square)"
    )
    parser.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for results/ (default: current directory)"
    )
    parser.add_argument("--no-log", action="store_true", help="Do not write CSV files")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logging.info(f"{TERM_BLUE}Running scenario: {args.scenario}{TERM_RESET}")

    segments = SCENARIOS[args.scenario]
    if args.no_log:
        result = run_scenario(segments)
    else:
        with DataCollector(output_dir=args.output_dir) as collector:
            result = run_scenario(segments, data_collector=collector)

    est, true = result.estimated_pose, result.true_pose
    logging.info(
        f"{TERM_ORANGE}→ Estimated: x={est.x:.3f} m  y={est.y:.3f} m  "
        f"heading={math.degrees(est.heading):.1f}°{TERM_RESET}"
    )
    logging.info(
        f"{TERM_BLUE}→ True:      x={true.x:.3f} m  y={true.y:.3f} m  "
        f"heading={math.degrees(true.heading):.1f}°{TERM_RESET}"
    )
    logging.info(f"→ {result.ticks} ticks, final position error {result.position_error * 1000.0:.2f} mm")
    return 0

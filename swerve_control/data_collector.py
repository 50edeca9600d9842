"""Data collection and CSV logging for swerve drive runs.

This module provides CSV data logging for:
- Pose estimates (field position and heading)
- Ground-truth poses (simulation only)
- Commanded module states (speed and angle per module)
- Drive requests (x, y, rotation, field-relative flag)
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence, TextIO

from .config import MODULE_NAMES, TERM_BLUE, TERM_RESET
from .geometry import ModuleState, Pose

POSE_HEADERS = ["timestamp", "x", "y", "heading", "true_x", "true_y", "true_heading"]
MODULE_HEADERS = ["timestamp"] + [
    f"{name.lower()}_{field}" for name in MODULE_NAMES for field in ("speed", "angle")
]
COMMAND_HEADERS = ["timestamp", "x_speed", "y_speed", "rot", "field_relative"]


class DataCollector:
    """Manages CSV file creation and logging for swerve run data.

    Attributes:
        run_dir: Directory path for this run's output files.
        pose_output_path: Path of the pose CSV.
        module_output_path: Path of the module state CSV.
        command_output_path: Path of the drive command CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        # CSV file handles
        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.module_csv_file: Optional[TextIO] = None
        self.module_csv_writer: Any = None
        self.command_csv_file: Optional[TextIO] = None
        self.command_csv_writer: Any = None

        # Determine run directory
        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # Create timestamped directory: results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / "results" / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.module_output_path: Path = self.run_dir / "module_data.csv"
        self.command_output_path: Path = self.run_dir / "command_data.csv"

    def setup(self) -> None:
        """Create the CSV files and write their headers.

        Must be called before writing data.
        """
        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(POSE_HEADERS)

        self.module_csv_file = open(self.module_output_path, "w", newline="")
        self.module_csv_writer = csv.writer(self.module_csv_file)
        self.module_csv_writer.writerow(MODULE_HEADERS)

        self.command_csv_file = open(self.command_output_path, "w", newline="")
        self.command_csv_writer = csv.writer(self.command_csv_file)
        self.command_csv_writer.writerow(COMMAND_HEADERS)

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}/{TERM_RESET}")

    def log_pose(self, timestamp: float, pose: Pose, true_pose: Optional[Pose] = None) -> None:
        """Log a pose estimate (and optional ground truth) to CSV.

        Args:
            timestamp: Time since start (seconds).
            pose: Estimated field pose.
            true_pose: Ground-truth pose, if known (simulation).
        """
        truth = [true_pose.x, true_pose.y, true_pose.heading] if true_pose else ["", "", ""]
        self.pose_csv_writer.writerow([timestamp, pose.x, pose.y, pose.heading] + truth)

    def log_module_states(self, timestamp: float, states: Sequence[ModuleState]) -> None:
        """Log the four dispatched module states to CSV.

        Args:
            timestamp: Time since start (seconds).
            states: Module states in canonical order.
        """
        row: list = [timestamp]
        for state in states:
            row.extend([state.speed, state.angle])
        self.module_csv_writer.writerow(row)

    def log_command(
        self, timestamp: float, x_speed: float, y_speed: float, rot: float, field_relative: bool
    ) -> None:
        """Log a drive request to CSV."""
        self.command_csv_writer.writerow([timestamp, x_speed, y_speed, rot, int(field_relative)])

    def close(self) -> None:
        """Flush and close all open CSV files."""
        for handle in (self.pose_csv_file, self.module_csv_file, self.command_csv_file):
            if handle and not handle.closed:
                handle.close()

    def __enter__(self) -> "DataCollector":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

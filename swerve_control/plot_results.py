#!/usr/bin/env python3
"""
Standalone script to visualize swerve drive runs.

This script loads pose and module data from a run directory and plots the
estimated vs. true trajectory, heading over time, and commanded module speeds.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .config import MODULE_NAMES, PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE, TERM_BLUE, TERM_RESET


def load_csv_data(filepath: Path) -> Tuple[List[str], List[List[str]]]:
    """Load CSV file and return headers and data rows.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    with open(filepath, newline="") as f:
        reader = csv.reader(f)
        headers = next(reader)
        data_rows = list(reader)

    return headers, data_rows


def load_csv_to_dict(filepath: Path) -> Dict[str, np.ndarray]:
    """Load a numeric CSV into a dict of column arrays (empty cells become NaN)."""
    headers, rows = load_csv_data(filepath)
    columns: Dict[str, list] = {h: [] for h in headers}

    for row in rows:
        if len(row) != len(headers):
            continue
        for header, cell in zip(headers, row):
            columns[header].append(float(cell) if cell else np.nan)

    return {h: np.array(v) for h, v in columns.items()}


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    """List all available run directories."""
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def plot_trajectory(pose_data: Dict[str, np.ndarray], save_path: Optional[Path] = None) -> Figure:
    """Plot estimated (and, if logged, true) trajectory on the field."""
    fig, ax = plt.subplots(figsize=(8, 8))

    if "true_x" in pose_data and not np.all(np.isnan(pose_data["true_x"])):
        ax.plot(pose_data["true_x"], pose_data["true_y"], color=PLOT_BLUE, linestyle="--", label="True")
    ax.plot(pose_data["x"], pose_data["y"], color=PLOT_ORANGE, label="Estimated")
    ax.scatter(pose_data["x"][:1], pose_data["y"][:1], color=PLOT_TAUPE, zorder=5, label="Start")

    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    ax.set_title("Field Trajectory")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax.legend(loc="best")

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_heading(pose_data: Dict[str, np.ndarray], save_path: Optional[Path] = None) -> Figure:
    """Plot unwrapped heading over time."""
    fig, ax = plt.subplots(figsize=(10, 4))
    t = pose_data["timestamp"]

    ax.plot(t, np.degrees(np.unwrap(pose_data["heading"])), color=PLOT_ORANGE, label="Estimated")
    if "true_heading" in pose_data and not np.all(np.isnan(pose_data["true_heading"])):
        ax.plot(
            t, np.degrees(np.unwrap(pose_data["true_heading"])), color=PLOT_BLUE, linestyle="--", label="True"
        )

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Heading (deg, unwrapped)")
    ax.set_title("Heading")
    ax.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax.legend(loc="best")

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_module_speeds(module_data: Dict[str, np.ndarray], save_path: Optional[Path] = None) -> Figure:
    """Plot commanded speed of each module over time."""
    fig, ax = plt.subplots(figsize=(10, 4))
    t = module_data["timestamp"]

    for name in MODULE_NAMES:
        ax.plot(t, module_data[f"{name.lower()}_speed"], label=name)

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Speed (m/s)")
    ax.set_title("Commanded Module Speeds")
    ax.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax.legend(loc="best")

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> List[Figure]:
    """Generate all plots for one run directory.

    Raises:
        FileNotFoundError: If pose_data.csv is missing.
    """
    pose_data = load_csv_to_dict(run_dir / "pose_data.csv")
    figures = [
        plot_trajectory(pose_data, run_dir / "trajectory.png" if save_plots else None),
        plot_heading(pose_data, run_dir / "heading.png" if save_plots else None),
    ]

    module_path = run_dir / "module_data.csv"
    if module_path.exists():
        module_data = load_csv_to_dict(module_path)
        figures.append(plot_module_speeds(module_data, run_dir / "module_speeds.png" if save_plots else None))

    if show_plots:
        plt.show()
    return figures


def main() -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize swerve drive runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m swerve_control.plot_results

  # Plot a specific run and save figures to its directory
  python -m swerve_control.plot_results --run run_20261017_120000 --save --no-show
        """,
    )
    parser.add_argument(
        "--run",
        type=str,
        default=None,
        help="Name of the run directory to plot. If not specified, plots the most recent run.",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Path to the results directory (default: results)",
    )
    parser.add_argument(
        "--save", action="store_true", help="Save plots as PNG files in the run directory"
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")

    args = parser.parse_args()
    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            sys.exit(1)
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
        if args.save:
            logging.info(f"{TERM_BLUE}✓ Saved plots to {run_dir}/{TERM_RESET}")
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains pose_data.csv")
        sys.exit(1)


if __name__ == "__main__":
    main()

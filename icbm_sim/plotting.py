"""
ICBM Trajectory Optimizer - Plotting

Reporting plots for a solved trajectory: optimizer convergence and the
replayed flight of the best parameters (altitude, speed, mass, thrust and
a 3D view of the trajectory around the Earth).

Uses the non-interactive Agg backend so plots can be generated headless.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for batch processing
import matplotlib.pyplot as plt
import numpy as np

from . import constants as C

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class FlightData:
    """Flight log converted to arrays for plotting.

    Attributes:
        time: Time (s)
        altitude: Altitude (km)
        speed: Speed (km/s)
        mass: Total mass (kg)
        thrust: Thrust acceleration magnitude (km/s^2)
        incline_angle: Thrust angle from vertical (deg)
        position: Positions [n x 3] (km)
    """
    time: np.ndarray
    altitude: np.ndarray
    speed: np.ndarray
    mass: np.ndarray
    thrust: np.ndarray
    incline_angle: np.ndarray
    position: np.ndarray


def configure_plot_style() -> None:
    """Configure matplotlib defaults for report plots."""
    plt.rcParams.update({
        'figure.figsize': (10, 6),
        'savefig.dpi': 150,
        'axes.grid': True,
        'axes.axisbelow': True,
        'grid.alpha': 0.3,
        'font.size': 11,
        'axes.titlesize': 13,
        'axes.labelsize': 12,
        'legend.fontsize': 10,
        'lines.linewidth': 1.8,
        'xtick.direction': 'in',
        'ytick.direction': 'in',
    })


def extract_flight_data(log) -> FlightData:
    """Convert a FlightLog (or any object with the same lists) to arrays."""
    return FlightData(
        time=np.asarray(log.time, dtype=float),
        altitude=np.asarray(log.altitude, dtype=float),
        speed=np.asarray(log.speed, dtype=float),
        mass=np.asarray(log.mass, dtype=float),
        thrust=np.asarray(log.thrust, dtype=float),
        incline_angle=np.asarray(log.incline_angle, dtype=float),
        position=np.column_stack([log.position_x, log.position_y, log.position_z]).astype(float),
    )


def _burnout_index(data: FlightData) -> Optional[int]:
    """Index of the first step without thrust after a powered phase."""
    powered = data.thrust > 0.0
    if not powered.any():
        return None
    after = np.nonzero(~powered & (np.arange(len(powered)) > np.argmax(powered)))[0]
    return int(after[0]) if len(after) else None


def _save(fig, output_dir: str, name: str) -> str:
    plt.tight_layout()
    path = os.path.join(output_dir, name)
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_convergence(history: Sequence[float], output_dir: str) -> str:
    """Best-ever fitness per generation.

    Args:
        history: Best-ever fitness after each generation
        output_dir: Directory to save the plot

    Returns:
        Path to saved plot file
    """
    fig, ax = plt.subplots()
    generations = np.arange(len(history))
    values = np.asarray(history, dtype=float)

    ax.plot(generations, values, 'b-', marker='o', markersize=3, label='Best fitness')
    if len(values) and np.all(values > 0):
        ax.set_yscale('log')
    ax.set_xlabel('Generation')
    ax.set_ylabel('Fitness (km)')
    ax.set_title('Optimizer Convergence', fontweight='bold')
    ax.legend(loc='upper right')

    return _save(fig, output_dir, '01_convergence.png')


def plot_altitude_profile(data: FlightData, output_dir: str) -> str:
    """Altitude vs time with liftoff, burnout and end of flight marked."""
    fig, ax = plt.subplots()
    ax.fill_between(data.time, 0, data.altitude, alpha=0.25, color='#1f77b4')
    ax.plot(data.time, data.altitude, 'b-', linewidth=2, label='Altitude')

    ax.scatter([data.time[0]], [data.altitude[0]],
               c='green', s=80, marker='o', zorder=5, label='Liftoff')
    burnout = _burnout_index(data)
    if burnout is not None:
        ax.scatter([data.time[burnout]], [data.altitude[burnout]],
                   c='red', s=80, marker='x', zorder=5,
                   label=f'Burnout ({data.altitude[burnout]:.1f} km)')
    ax.scatter([data.time[-1]], [data.altitude[-1]],
               c='darkorange', s=90, marker='*', zorder=5, label='End of flight')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title('Altitude Profile', fontweight='bold')
    ax.legend(loc='upper right')
    ax.set_xlim(0, max(data.time[-1], 1.0))

    return _save(fig, output_dir, '02_altitude_profile.png')


def plot_speed_profile(data: FlightData, output_dir: str) -> str:
    """Speed vs time."""
    fig, ax = plt.subplots()
    ax.plot(data.time, data.speed, 'g-', linewidth=2, label='Speed')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Speed (km/s)')
    ax.set_title('Speed Profile', fontweight='bold')
    ax.legend(loc='upper right')

    return _save(fig, output_dir, '03_speed_profile.png')


def plot_mass_and_thrust(data: FlightData, output_dir: str) -> str:
    """Total mass and thrust acceleration vs time on twin axes."""
    fig, ax = plt.subplots()
    ax.plot(data.time, data.mass, 'k-', linewidth=2, label='Mass')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Mass (kg)')

    ax2 = ax.twinx()
    ax2.plot(data.time, data.thrust * 1000.0, 'r--', linewidth=1.5, label='Thrust')
    ax2.set_ylabel('Thrust acceleration (m/s²)')
    ax2.grid(False)

    lines = ax.get_lines() + ax2.get_lines()
    ax.legend(lines, [line.get_label() for line in lines], loc='upper right')
    ax.set_title('Mass and Thrust', fontweight='bold')

    return _save(fig, output_dir, '04_mass_thrust.png')


def plot_incline_angle(data: FlightData, output_dir: str) -> str:
    """Thrust angle from vertical vs time."""
    fig, ax = plt.subplots()
    ax.plot(data.time, data.incline_angle, 'm-', linewidth=2)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Thrust angle from vertical (deg)')
    ax.set_title('Gravity Turn', fontweight='bold')

    return _save(fig, output_dir, '05_incline_angle.png')


def plot_trajectory_3d(data: FlightData, output_dir: str,
                       target: np.ndarray = None,
                       earth_radius: float = C.EARTH_RADIUS) -> str:
    """Trajectory around a wireframe Earth, with the target if given."""
    fig = plt.figure(figsize=(9, 9))
    ax = fig.add_subplot(111, projection='3d')

    u = np.linspace(0, 2 * np.pi, 36)
    v = np.linspace(0, np.pi, 18)
    xs = earth_radius * np.outer(np.cos(u), np.sin(v))
    ys = earth_radius * np.outer(np.sin(u), np.sin(v))
    zs = earth_radius * np.outer(np.ones_like(u), np.cos(v))
    ax.plot_wireframe(xs, ys, zs, color='lightgray', linewidth=0.4)

    p = data.position
    ax.plot(p[:, 0], p[:, 1], p[:, 2], 'b-', linewidth=2, label='Trajectory')
    ax.scatter(*p[0], c='green', s=60, label='Launch')
    ax.scatter(*p[-1], c='darkorange', s=60, marker='*', label='End of flight')
    if target is not None:
        ax.scatter(*np.asarray(target), c='red', s=60, marker='x', label='Target')

    ax.set_xlabel('X (km)')
    ax.set_ylabel('Y (km)')
    ax.set_zlabel('Z (km)')
    ax.set_title('Trajectory', fontweight='bold')
    ax.legend(loc='upper left')

    return _save(fig, output_dir, '06_trajectory_3d.png')


def generate_all_plots(result, log, output_dir: str = "plots",
                       target: np.ndarray = None) -> List[str]:
    """Generate the convergence plot and all flight plots.

    Args:
        result: TrajectoryResult (only its history is used) or None
        log: FlightLog of the replayed best flight
        output_dir: Directory to save plots (created if it doesn't exist)
        target: Target position for the 3D plot (km)

    Returns:
        List of paths to saved plot files
    """
    os.makedirs(output_dir, exist_ok=True)
    configure_plot_style()

    saved_files = []
    if result is not None and len(result.history):
        saved_files.append(plot_convergence(result.history, output_dir))

    if log is not None and len(log.time):
        data = extract_flight_data(log)
        plot_functions = [
            plot_altitude_profile,
            plot_speed_profile,
            plot_mass_and_thrust,
            plot_incline_angle,
        ]
        for plot_func in plot_functions:
            saved_files.append(plot_func(data, output_dir))
        saved_files.append(plot_trajectory_3d(data, output_dir, target))

    logger.info(f"Saved {len(saved_files)} plots to {output_dir}")
    return saved_files

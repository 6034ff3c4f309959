"""
ICBM Trajectory Optimizer - Flight Simulation Loop

Steps a Rocket forward until one of the stop conditions holds:
- The travelled distance exceeds the distance threshold
- The altitude exceeds the altitude ceiling
- The rocket has landed
- The time budget is exhausted

All of these are normal exits of the loop, never errors.

Step-size sensitivity:
    The gravity turn and the thrust cutoff are evaluated per step from
    accumulated tick counters, so trajectories (and optimizer results)
    depend on the step. A 1 s step and a 0.01 s step over the same 1000 s
    diverge mostly around the start of the gravity turn, where the turn
    begins up to one step late. Pass the step explicitly when comparing
    runs.
"""

import csv
import logging
import math
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from . import constants as C
from .config import FlightConstraints
from .rocket import Rocket

# Configure module logger
logger = logging.getLogger(__name__)


class StopReason(Enum):
    LANDED = "landed"
    DISTANCE_EXCEEDED = "distance_exceeded"
    ALTITUDE_EXCEEDED = "altitude_exceeded"
    TIME_EXHAUSTED = "time_exhausted"


@dataclass
class FlightLog:
    """Per-step flight record for reporting and plots."""
    time: List[float] = field(default_factory=list)
    altitude: List[float] = field(default_factory=list)
    speed: List[float] = field(default_factory=list)
    mass: List[float] = field(default_factory=list)
    thrust: List[float] = field(default_factory=list)
    incline_angle: List[float] = field(default_factory=list)
    travelled_distance: List[float] = field(default_factory=list)
    position_x: List[float] = field(default_factory=list)
    position_y: List[float] = field(default_factory=list)
    position_z: List[float] = field(default_factory=list)

    def append(self, rocket: Rocket):
        """Log the current state of the rocket."""
        s = rocket.state
        self.time.append(s.flight_time)
        self.altitude.append(s.altitude)
        self.speed.append(s.speed)
        self.mass.append(s.mass)
        self.thrust.append(float(np.linalg.norm(s.thrust)))
        self.incline_angle.append(np.degrees(s.thrust_incline_angle))
        self.travelled_distance.append(s.travelled_distance_km)
        self.position_x.append(s.position[0])
        self.position_y.append(s.position[1])
        self.position_z.append(s.position[2])

    def __len__(self) -> int:
        return len(self.time)

    def positions(self) -> np.ndarray:
        """Logged positions as an [n, 3] array (km)."""
        return np.column_stack([self.position_x, self.position_y, self.position_z])

    def to_csv(self, filename: str):
        """Write the log to CSV."""
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        header = [
            'time_s', 'altitude_km', 'speed_km_s', 'mass_kg', 'thrust_km_s2',
            'incline_angle_deg', 'travelled_distance_km',
            'pos_x_km', 'pos_y_km', 'pos_z_km',
        ]
        with open(filename, 'w', newline='') as fh:
            writer = csv.writer(fh)
            writer.writerow(header)
            for i in range(len(self.time)):
                writer.writerow([
                    self.time[i], self.altitude[i], self.speed[i], self.mass[i],
                    self.thrust[i], self.incline_angle[i], self.travelled_distance[i],
                    self.position_x[i], self.position_y[i], self.position_z[i],
                ])


@dataclass
class FlightResult:
    """
    Outcome of simulate_flight().

    Attributes:
        rocket: The simulated rocket, in its final state
        reason: Why the loop stopped
        steps: Number of update() calls made
    """
    rocket: Rocket
    reason: StopReason
    steps: int

    @property
    def position(self) -> np.ndarray:
        return self.rocket.position

    @property
    def flight_time(self) -> float:
        return self.rocket.flight_time


def check_termination(rocket: Rocket,
                      flight_constraints: FlightConstraints) -> Optional[StopReason]:
    """
    Check the per-step stop conditions in order: distance, altitude, landing.

    Returns:
        The stop reason, or None to keep flying
    """
    threshold = flight_constraints.max_distance_threshold
    if threshold is not None and rocket.state.travelled_distance_km > threshold:
        return StopReason.DISTANCE_EXCEEDED

    max_altitude = flight_constraints.max_altitude
    if max_altitude is not None and rocket.altitude > max_altitude:
        return StopReason.ALTITUDE_EXCEEDED

    if rocket.has_landed:
        return StopReason.LANDED

    return None


def step_budget(max_flight_time: float, step: float) -> int:
    """Number of steps needed to cover max_flight_time."""
    return int(math.ceil(max_flight_time / step - 1e-9))


def simulate_flight(rocket: Rocket, flight_constraints: FlightConstraints,
                    step: float = C.DT, log: FlightLog = None) -> FlightResult:
    """
    Fly the rocket until a stop condition or the time budget runs out.

    Args:
        rocket: Freshly constructed rocket (mutated in place)
        flight_constraints: Stop conditions
        step: Integration time step (s)
        log: Optional FlightLog receiving the launch state and every step

    Returns:
        FlightResult

    Raises:
        ValueError: If step <= 0
    """
    if step <= 0:
        raise ValueError(f"Time step must be positive, got {step}")

    if log is not None:
        log.append(rocket)

    steps = 0
    reason = StopReason.TIME_EXHAUSTED
    for _ in range(step_budget(flight_constraints.max_flight_time_seconds, step)):
        rocket.update(step)
        steps += 1

        if log is not None:
            log.append(rocket)

        stop = check_termination(rocket, flight_constraints)
        if stop is not None:
            reason = stop
            break

    logger.debug(f"Flight stopped: {reason.value} after {steps} steps, "
                 f"t={rocket.flight_time:.1f}s, altitude={rocket.altitude:.2f}km")
    return FlightResult(rocket=rocket, reason=reason, steps=steps)

"""
ICBM Trajectory Optimizer - Rocket State

This module defines the mutable per-flight state advanced by the integrator.
A fresh RocketState is created for every fitness evaluation and discarded
afterwards; nothing here is shared between evaluations.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class RocketState:
    """
    State of a rocket in flight.

    Attributes:
        position: Position in the Earth-centred frame (km) [3]
        velocity: Velocity (km/s) [3]
        thrust: Thrust acceleration applied during the last step (km/s^2) [3]
        gravity: Gravitational acceleration at the last step (km/s^2) [3]
        altitude: Altitude above the surface (km)
        mass: Current total mass (kg)
        flight_time: Simulated time since launch (s)
        current_thrust_incline_duration: Time spent inclining the thrust (s)
        thrust_incline_angle: Current thrust angle from vertical (rad)
        travelled_distance: Unsigned per-axis displacement accumulator (km) [3]
        max_altitude: Highest altitude reached (km)
        has_landed: Terminal flag, set once the rocket re-crosses the surface
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    thrust: np.ndarray = field(default_factory=lambda: np.zeros(3))
    gravity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    altitude: float = 0.0
    mass: float = 0.0
    flight_time: float = 0.0
    current_thrust_incline_duration: float = 0.0
    thrust_incline_angle: float = 0.0
    travelled_distance: np.ndarray = field(default_factory=lambda: np.zeros(3))
    max_altitude: float = 0.0
    has_landed: bool = False

    def __post_init__(self):
        """Ensure vectors are float64 numpy arrays."""
        for attr in ['position', 'velocity', 'thrust', 'gravity', 'travelled_distance']:
            setattr(self, attr, np.array(getattr(self, attr), dtype=np.float64))

    def copy(self) -> 'RocketState':
        """Create a deep copy of the state."""
        return RocketState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            thrust=self.thrust.copy(),
            gravity=self.gravity.copy(),
            altitude=self.altitude,
            mass=self.mass,
            flight_time=self.flight_time,
            current_thrust_incline_duration=self.current_thrust_incline_duration,
            thrust_incline_angle=self.thrust_incline_angle,
            travelled_distance=self.travelled_distance.copy(),
            max_altitude=self.max_altitude,
            has_landed=self.has_landed,
        )

    @property
    def speed(self) -> float:
        """Magnitude of velocity (km/s)."""
        return float(np.linalg.norm(self.velocity))

    @property
    def travelled_distance_km(self) -> float:
        """Magnitude of the travelled-distance accumulator (km)."""
        return float(np.linalg.norm(self.travelled_distance))

    def __str__(self) -> str:
        """Human-readable state summary."""
        return (
            f"RocketState(t={self.flight_time:.1f}s, "
            f"alt={self.altitude:.2f}km, "
            f"v={self.speed:.3f}km/s, "
            f"m={self.mass:.1f}kg)"
        )

"""
ICBM Trajectory Optimizer - Rocket Flight Model

Point-mass rocket under central gravity and a staged thrust law:

1. Vertical ascent: thrust anti-parallel to local gravity.
2. Gravity turn: once above start_incline_after_distance, the thrust
   rotates toward the target heading at thrust_incline_velocity (rad/s),
   for at most thrust_incline_max_duration seconds, and never past the
   target heading itself.
3. Ballistic coast after burnout until the rocket re-crosses the surface.

The target heading is the straight-line launch->target direction projected
onto the local horizontal plane at the rocket's current position.
"""

from dataclasses import dataclass, fields
from typing import Sequence, Tuple

import numpy as np

from . import constants as C
from .earth import Earth
from .frames import angle_between, normalize, project_onto_plane, rotate_about_axis
from .integrators import semi_implicit_euler_step
from .mass import (
    current_mass, fuel_combustion_time, ideal_delta_v, initial_total_mass,
    step_thrust_acceleration,
)
from .state import RocketState
from .validation import ConfigurationError


@dataclass(frozen=True)
class RocketParameters:
    """
    Free flight parameters of a rocket, in genome order.

    Attributes:
        start_incline_after_distance: Altitude at which the gravity turn starts (km)
        thrust_incline_max_duration: Maximum duration of the gravity turn (s)
        thrust_incline_velocity: Angular rate of the gravity turn (rad/s)
        fuel_mass: Propellant mass (kg)
        exhaust_velocity: Effective exhaust velocity (km/s)
        mass_flow_rate: Propellant mass flow rate (kg/s)
        payload_mass: Fixed payload mass, not optimized (kg)
    """
    start_incline_after_distance: float = C.START_INCLINE_AFTER_DISTANCE
    thrust_incline_max_duration: float = C.THRUST_INCLINE_MAX_DURATION
    thrust_incline_velocity: float = C.THRUST_INCLINE_VELOCITY
    fuel_mass: float = C.FUEL_MASS
    exhaust_velocity: float = C.EXHAUST_VELOCITY
    mass_flow_rate: float = C.MASS_FLOW_RATE
    payload_mass: float = C.PAYLOAD_MASS

    GENE_ORDER = (
        'start_incline_after_distance',
        'thrust_incline_max_duration',
        'thrust_incline_velocity',
        'fuel_mass',
        'exhaust_velocity',
        'mass_flow_rate',
    )

    def __post_init__(self):
        if self.payload_mass <= 0.0:
            raise ConfigurationError(
                f"Payload mass must be positive, got {self.payload_mass}"
            )
        if self.fuel_mass < 0.0 or self.mass_flow_rate < 0.0:
            raise ConfigurationError("Fuel mass and mass flow rate must be non-negative")

    @classmethod
    def from_genes(cls, genes: Sequence[float],
                   payload_mass: float = C.PAYLOAD_MASS) -> 'RocketParameters':
        """Decode a gene vector (GENE_ORDER) into parameters."""
        if len(genes) != len(cls.GENE_ORDER):
            raise ConfigurationError(
                f"Expected {len(cls.GENE_ORDER)} genes, got {len(genes)}"
            )
        values = {name: float(value) for name, value in zip(cls.GENE_ORDER, genes)}
        return cls(payload_mass=payload_mass, **values)

    def to_genes(self) -> np.ndarray:
        """Encode the parameters as a gene vector (GENE_ORDER)."""
        return np.array([getattr(self, name) for name in self.GENE_ORDER])

    @property
    def initial_mass(self) -> float:
        """Lift-off mass (kg)."""
        return initial_total_mass(self.payload_mass, self.fuel_mass)

    @property
    def fuel_combustion_time(self) -> float:
        """Burn duration (s)."""
        return fuel_combustion_time(self.fuel_mass, self.mass_flow_rate)

    @property
    def ideal_delta_v(self) -> float:
        """Velocity gained from a full burn without gravity losses (km/s)."""
        return ideal_delta_v(self.payload_mass, self.fuel_mass, self.exhaust_velocity)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class Rocket:
    """
    Rocket flight simulation advanced one step at a time by update().

    Args:
        earth: Earth model (read only)
        initial_position: Launch position (km) [3]
        target_direction: Straight-line direction toward the target [3]
        params: Flight parameters
    """

    def __init__(self, earth: Earth, initial_position: np.ndarray,
                 target_direction: np.ndarray,
                 params: RocketParameters = None):
        self.earth = earth
        self.initial_position = np.array(initial_position, dtype=np.float64)
        self.target_direction = normalize(np.asarray(target_direction, dtype=np.float64))
        self.params = params if params is not None else RocketParameters()

        self.state = RocketState(
            position=self.initial_position.copy(),
            altitude=earth.altitude_of(self.initial_position),
            mass=self.params.initial_mass,
        )
        self.state.max_altitude = max(0.0, self.state.altitude)

    # -- read-only views of the state -----------------------------------------

    @property
    def position(self) -> np.ndarray:
        return self.state.position

    @property
    def velocity(self) -> np.ndarray:
        return self.state.velocity

    @property
    def thrust(self) -> np.ndarray:
        return self.state.thrust

    @property
    def altitude(self) -> float:
        return self.state.altitude

    @property
    def flight_time(self) -> float:
        return self.state.flight_time

    @property
    def max_altitude(self) -> float:
        return self.state.max_altitude

    @property
    def has_landed(self) -> bool:
        return self.state.has_landed

    @property
    def travelled_distance(self) -> np.ndarray:
        return self.state.travelled_distance

    @property
    def displacement(self) -> np.ndarray:
        """Straight-line offset from the launch position (km)."""
        return self.state.position - self.initial_position

    @property
    def fuel_combustion_time(self) -> float:
        return self.params.fuel_combustion_time

    # -- physics ----------------------------------------------------------------

    def target_incline_direction(self, up: np.ndarray) -> np.ndarray:
        """
        Target heading in the local horizontal plane.

        If the straight-line direction is (anti)parallel to the local
        vertical, e.g. an antipodal target, the heading falls back to local
        north, then to the +X axis projection at the poles.
        """
        for candidate in (self.target_direction, C.EARTH_POLAR_AXIS,
                          np.array([1.0, 0.0, 0.0])):
            heading = project_onto_plane(candidate, up)
            if np.linalg.norm(heading) > 1e-9:
                return normalize(heading)
        return np.zeros(3)

    def set_thrust(self, tick: float):
        """
        Compute the thrust vector for the step [flight_time, flight_time + tick].

        Args:
            tick: Time step (s)
        """
        s = self.state
        p = self.params

        magnitude = step_thrust_acceleration(
            s.flight_time, tick, p.payload_mass, p.fuel_mass,
            p.exhaust_velocity, p.mass_flow_rate,
        )
        if magnitude == 0.0:
            s.thrust = np.zeros(3)
            return

        up = normalize(-s.gravity)

        if (s.altitude > p.start_incline_after_distance
                and s.current_thrust_incline_duration <= p.thrust_incline_max_duration):
            s.current_thrust_incline_duration += tick

        heading = self.target_incline_direction(up)
        max_angle = angle_between(up, heading)
        s.thrust_incline_angle = min(
            p.thrust_incline_velocity * s.current_thrust_incline_duration,
            max_angle,
        )

        axis = np.cross(up, heading)
        direction = rotate_about_axis(up, axis, s.thrust_incline_angle)
        s.thrust = direction * magnitude

    def update(self, tick: float = C.DT):
        """
        Advance the flight by one semi-implicit Euler step.

        Args:
            tick: Time step (s)

        Raises:
            ValueError: If tick <= 0
        """
        if tick <= 0:
            raise ValueError(f"Time step tick must be positive, got {tick}")

        s = self.state
        if s.has_landed:
            return

        s.altitude = self.earth.altitude_of(s.position)
        s.gravity = self.earth.gravity_at(s.position)

        self.set_thrust(tick)

        if (np.linalg.norm(self.displacement) > C.LANDING_DISTANCE_THRESHOLD
                and s.altitude <= 0.0):
            s.velocity = np.zeros(3)
            s.thrust = np.zeros(3)
            s.has_landed = True
            return

        if s.altitude < -C.SURFACE_TOLERANCE:
            # Still on the pad: thrust does not overcome gravity yet
            s.position = self.initial_position.copy()
            s.velocity = np.zeros(3)
            s.thrust = np.zeros(3)
        else:
            new_position, s.velocity = semi_implicit_euler_step(
                s.position, s.velocity, s.gravity + s.thrust, tick
            )
            s.travelled_distance += np.abs(new_position - s.position)
            s.position = new_position

        s.flight_time += tick
        s.mass = current_mass(s.flight_time, self.params.payload_mass,
                              self.params.fuel_mass, self.params.mass_flow_rate)
        s.altitude = self.earth.altitude_of(s.position)
        s.max_altitude = max(s.max_altitude, s.altitude)

    def run(self, duration: float, tick: float = C.DT) -> RocketState:
        """
        Step the flight for a fixed duration, stopping early on landing.

        Returns:
            The final state
        """
        steps = int(np.ceil(duration / tick - 1e-9))
        for _ in range(steps):
            self.update(tick)
            if self.state.has_landed:
                break
        return self.state

    def __str__(self) -> str:
        return f"Rocket({self.state})"


def straight_line_direction(start: np.ndarray, target: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Unit direction and Euclidean distance from start to target (km).
    """
    delta = np.asarray(target, dtype=np.float64) - np.asarray(start, dtype=np.float64)
    return normalize(delta), float(np.linalg.norm(delta))

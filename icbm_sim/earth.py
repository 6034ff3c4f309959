"""
ICBM Trajectory Optimizer - Earth Model

Spherical, non-oblate Earth with inverse-square gravity and a sidereal
rotation rate about the polar (+Y) axis.

The flight model only reads from the Earth (gravity_at, altitude_of), so a
single instance is shared by concurrent fitness evaluations. Rotation is
applied on demand by rotate_with_body().
"""

from typing import Tuple

import numpy as np

from . import constants as C
from .frames import normalize, rotation_about_y


class Earth:
    """
    Celestial body the rocket flies around.

    Attributes:
        radius: Mean radius (km)
        mass: Mass (kg)
        position: Centre of the body (km) [3]
        rotation_rate: Sidereal rotation rate (rad/s)
    """

    def __init__(self, radius: float = C.EARTH_RADIUS, mass: float = C.EARTH_MASS,
                 position: np.ndarray = None,
                 rotation_rate: float = C.EARTH_ROTATION_RATE):
        self.radius = float(radius)
        self.mass = float(mass)
        if position is None:
            position = np.zeros(3)
        self.position = np.asarray(position, dtype=np.float64)
        self.rotation_rate = float(rotation_rate)

    def gravity_at(self, target: np.ndarray) -> np.ndarray:
        """
        Gravitational acceleration at a point.

        Central gravity computed in SI units and scaled to km/s^2:
            |g| = G * M / r_m^2 * 0.001,  r_m = r_km * 1000

        Args:
            target: Position (km) [3]

        Returns:
            Acceleration vector pointing to the centre (km/s^2). Zero at the
            centre itself (singularity protection).
        """
        to_centre = self.position - target
        distance_m = np.linalg.norm(to_centre) * C.M_PER_KM
        if distance_m < C.ZERO_TOLERANCE:
            return np.zeros(3)

        magnitude = C.G * self.mass / distance_m ** 2
        return normalize(to_centre) * (magnitude * C.KM_PER_M)

    def altitude_of(self, target: np.ndarray) -> float:
        """Distance to the surface (km); negative below it."""
        return float(np.linalg.norm(target - self.position) - self.radius)

    def rotate_with_body(self, target: np.ndarray, seconds: float) -> np.ndarray:
        """
        Rotate a surface-fixed point by the angle the Earth turns in seconds.

        Args:
            target: Position (km) [3]
            seconds: Elapsed time (s)

        Returns:
            Rotated position (km)
        """
        angle = self.rotation_rate * seconds
        relative = np.asarray(target, dtype=np.float64) - self.position
        return self.position + rotation_about_y(angle) @ relative

    def geo_to_position(self, latitude: float, longitude: float,
                        altitude: float = 0.0) -> np.ndarray:
        """
        Convert geographic coordinates to a position.

        Args:
            latitude: Latitude (deg), +90 on the +Y axis
            longitude: Longitude (deg)
            altitude: Height above the surface (km)

        Returns:
            Position (km) [3]
        """
        phi = np.radians(90.0 - latitude)       # polar angle
        theta = np.radians(longitude + 180.0)   # azimuthal angle
        r = self.radius + altitude

        return self.position + np.array([
            r * np.sin(phi) * np.cos(theta),
            r * np.cos(phi),
            r * np.sin(phi) * np.sin(theta),
        ])

    def position_to_geo(self, target: np.ndarray) -> Tuple[float, float]:
        """
        Convert a position to (latitude, longitude) in degrees.

        Longitude is wrapped to [-180, 180).
        """
        relative = np.asarray(target, dtype=np.float64) - self.position
        r = np.linalg.norm(relative)
        if r < C.ZERO_TOLERANCE:
            return 0.0, 0.0

        latitude = 90.0 - np.degrees(np.arccos(np.clip(relative[1] / r, -1.0, 1.0)))
        longitude = np.degrees(np.arctan2(relative[2], relative[0])) - 180.0
        longitude = (longitude + 180.0) % 360.0 - 180.0
        return float(latitude), float(longitude)

    def atmosphere_layer(self, altitude: float) -> str:
        """
        Name of the atmosphere layer at an altitude (km).

        Returns 'ground' below the surface and 'space' above the exosphere.
        """
        if altitude < 0.0:
            return "ground"
        for name, ceiling in C.ATMOSPHERE_LAYER_HEIGHTS:
            if altitude <= ceiling:
                return name
        return "space"

    def __repr__(self) -> str:
        return f"Earth(radius={self.radius:.1f}km, mass={self.mass:.3e}kg)"

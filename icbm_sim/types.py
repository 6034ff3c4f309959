"""
ICBM Trajectory Optimizer - Type Definitions

This module provides TypedDict definitions for structured return types,
improving type safety and IDE support.
"""

from typing import List, Optional, TypedDict


class RocketParametersDict(TypedDict):
    """Solved rocket parameters, keyed by name."""
    start_incline_after_distance: float  # Gravity turn start altitude (km)
    thrust_incline_max_duration: float  # Gravity turn duration cap (s)
    thrust_incline_velocity: float  # Gravity turn rate (rad/s)
    fuel_mass: float  # Propellant mass (kg)
    exhaust_velocity: float  # Effective exhaust velocity (km/s)
    mass_flow_rate: float  # Propellant flow (kg/s)
    payload_mass: float  # Fixed payload (kg)


class TrajectorySummary(TypedDict):
    """Flat summary of a solved trajectory, suitable for display or JSON."""
    status: str  # converged, exhausted or cancelled
    generations: int  # Completed optimizer generations
    fitness: float  # Best fitness (km, plus weighted seconds if minimizing time)
    miss_distance: float  # Final distance to the target (km)
    flight_time: float  # Simulated flight time (s)
    travelled_distance: float  # Travelled-distance accumulator magnitude (km)
    max_altitude: float  # Highest altitude reached (km)
    fuel_combustion_time: float  # Burn duration (s)
    thrust_incline_duration: float  # Time spent in the gravity turn (s)
    payload_mass: float  # kg
    fuel_mass: float  # Loaded propellant (kg)
    remaining_fuel_mass: float  # Propellant left at the end of the flight (kg)
    stop_reason: str  # Why the best flight stopped
    final_position: List[float]  # km
    final_latitude: Optional[float]  # deg
    final_longitude: Optional[float]  # deg
    elapsed_time: float  # Wall-clock solve time (s)
    ideal_delta_v: float  # Full-burn delta-v without gravity losses (km/s)
    apogee_layer: str  # Atmosphere layer at the highest point
    parameters: RocketParametersDict

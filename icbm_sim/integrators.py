"""
ICBM Trajectory Optimizer - Numerical Integration

Point-mass translational integrators. The flight model uses the
semi-implicit (symplectic) Euler scheme:

    v_new = v + a * dt
    p_new = p + v_new * dt

Trajectories are sensitive to dt, in particular around the gravity-turn
transition and thrust cutoff, which are evaluated once per step.
"""

from typing import Tuple

import numpy as np


def _check_inputs(position: np.ndarray, velocity: np.ndarray,
                  acceleration: np.ndarray, dt: float):
    if dt <= 0:
        raise ValueError(f"Time step dt must be positive, got {dt}")
    for name, vec in (('position', position), ('velocity', velocity),
                      ('acceleration', acceleration)):
        if np.shape(vec) != (3,):
            raise ValueError(f"{name} must have shape (3,), got {np.shape(vec)}")
    if np.any(np.isnan(acceleration)):
        raise ValueError("Acceleration contains NaN values")


def semi_implicit_euler_step(position: np.ndarray, velocity: np.ndarray,
                             acceleration: np.ndarray,
                             dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Perform a single semi-implicit Euler step.

    Args:
        position: Position (km) [3]
        velocity: Velocity (km/s) [3]
        acceleration: Total acceleration (km/s^2) [3]
        dt: Time step (s)

    Returns:
        (new_position, new_velocity)

    Raises:
        ValueError: If dt <= 0 or a vector has the wrong shape
    """
    _check_inputs(position, velocity, acceleration, dt)

    new_velocity = velocity + acceleration * dt
    new_position = position + new_velocity * dt
    return new_position, new_velocity


"""
ICBM Trajectory Optimizer - Propellant depletion and thrust law.

Mass is a closed-form function of elapsed time (m0 - mdot * t, floored at the
payload), never a running subtraction, so it carries no step-size bias.
"""

import numpy as np


def initial_total_mass(payload_mass: float, fuel_mass: float) -> float:
    """Lift-off mass (kg)."""
    return payload_mass + fuel_mass


def current_mass(t: float, payload_mass: float, fuel_mass: float,
                 mass_flow_rate: float) -> float:
    """
    Total mass after t seconds of burning.

    m(t) = max(m_payload, m_payload + m_fuel - mdot * t)
    """
    m0 = initial_total_mass(payload_mass, fuel_mass)
    return max(payload_mass, m0 - mass_flow_rate * max(t, 0.0))


def fuel_combustion_time(fuel_mass: float, mass_flow_rate: float) -> float:
    """Burn duration (s); infinite when nothing flows."""
    if mass_flow_rate <= 0.0:
        return float('inf')
    return fuel_mass / mass_flow_rate


def is_fuel_exhausted(t: float, payload_mass: float, fuel_mass: float,
                      mass_flow_rate: float) -> bool:
    """True once the total mass has dropped to the payload mass."""
    if mass_flow_rate <= 0.0 or fuel_mass <= 0.0:
        return True
    return mass_flow_rate * t >= fuel_mass


def thrust_impulse(t0: float, t1: float, payload_mass: float, fuel_mass: float,
                   exhaust_velocity: float, mass_flow_rate: float) -> float:
    """
    Velocity gained from thrust between t0 and t1 (km/s).

    Integral of the thrust law over the interval, i.e. the Tsiolkovsky
    equation v_e * ln(m(t0) / m(t1)). Zero after burnout; an interval that
    straddles burnout only counts the burning part.
    """
    if t1 <= t0 or is_fuel_exhausted(t0, payload_mass, fuel_mass, mass_flow_rate):
        return 0.0
    m_start = current_mass(t0, payload_mass, fuel_mass, mass_flow_rate)
    m_end = current_mass(t1, payload_mass, fuel_mass, mass_flow_rate)
    return exhaust_velocity * float(np.log(m_start / m_end))


def step_thrust_acceleration(t: float, dt: float, payload_mass: float,
                             fuel_mass: float, exhaust_velocity: float,
                             mass_flow_rate: float) -> float:
    """
    Thrust acceleration averaged over the step [t, t + dt] (km/s^2).

    Multiplying by dt recovers thrust_impulse, so the accumulated thrust
    delta-v matches the rocket equation for any step size.
    """
    if dt <= 0.0:
        raise ValueError(f"Time step dt must be positive, got {dt}")
    return thrust_impulse(t, t + dt, payload_mass, fuel_mass,
                          exhaust_velocity, mass_flow_rate) / dt


def ideal_delta_v(payload_mass: float, fuel_mass: float,
                  exhaust_velocity: float) -> float:
    """Total delta-v of a full burn (km/s)."""
    m0 = initial_total_mass(payload_mass, fuel_mass)
    return exhaust_velocity * float(np.log(m0 / payload_mass))

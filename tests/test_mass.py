import math

import pytest
import numpy as np
from icbm_sim import mass

PAYLOAD = 1000.0
FUEL = 2000.0
VE = 3.0
MDOT = 100.0


def test_initial_total_mass():
    assert mass.initial_total_mass(PAYLOAD, FUEL) == 3000.0

def test_current_mass_closed_form():
    assert mass.current_mass(0.0, PAYLOAD, FUEL, MDOT) == 3000.0
    assert mass.current_mass(5.0, PAYLOAD, FUEL, MDOT) == pytest.approx(2500.0)

def test_current_mass_floored_at_payload():
    assert mass.current_mass(1e6, PAYLOAD, FUEL, MDOT) == PAYLOAD

def test_current_mass_ignores_negative_time():
    assert mass.current_mass(-10.0, PAYLOAD, FUEL, MDOT) == 3000.0

def test_fuel_combustion_time():
    assert mass.fuel_combustion_time(FUEL, MDOT) == pytest.approx(20.0)
    assert math.isinf(mass.fuel_combustion_time(FUEL, 0.0))

def test_is_fuel_exhausted():
    assert not mass.is_fuel_exhausted(19.9, PAYLOAD, FUEL, MDOT)
    assert mass.is_fuel_exhausted(20.0, PAYLOAD, FUEL, MDOT)
    assert mass.is_fuel_exhausted(0.0, PAYLOAD, 0.0, MDOT)
    assert mass.is_fuel_exhausted(0.0, PAYLOAD, FUEL, 0.0)

def test_short_step_approaches_instantaneous_thrust_law():
    # a = mdot * ve / m(t)
    for t, m in [(0.0, 3000.0), (10.0, 2000.0)]:
        a = mass.step_thrust_acceleration(t, 1e-6, PAYLOAD, FUEL, VE, MDOT)
        assert a == pytest.approx(MDOT * VE / m, rel=1e-6)

def test_thrust_is_exactly_zero_after_burnout():
    for t in [20.0, 20.5, 100.0, 7200.0]:
        assert mass.step_thrust_acceleration(t, 1.0, PAYLOAD, FUEL, VE, MDOT) == 0.0

def test_thrust_impulse_matches_rocket_equation():
    dv = mass.thrust_impulse(0.0, 20.0, PAYLOAD, FUEL, VE, MDOT)
    assert dv == pytest.approx(mass.ideal_delta_v(PAYLOAD, FUEL, VE))
    assert dv == pytest.approx(VE * np.log(3.0))

def test_thrust_impulse_straddling_burnout_counts_burning_part():
    full = mass.thrust_impulse(0.0, 20.0, PAYLOAD, FUEL, VE, MDOT)
    assert mass.thrust_impulse(0.0, 50.0, PAYLOAD, FUEL, VE, MDOT) == pytest.approx(full)

def test_thrust_impulse_empty_interval():
    assert mass.thrust_impulse(5.0, 5.0, PAYLOAD, FUEL, VE, MDOT) == 0.0

@pytest.mark.parametrize("dt", [0.01, 0.1, 1.0, 3.0])
def test_step_averaged_thrust_is_step_size_independent(dt):
    """Summed thrust delta-v equals the rocket equation for any step."""
    steps = int(np.ceil(30.0 / dt))
    total = sum(mass.step_thrust_acceleration(i * dt, dt, PAYLOAD, FUEL, VE, MDOT) * dt
                for i in range(steps))
    assert total == pytest.approx(mass.ideal_delta_v(PAYLOAD, FUEL, VE), rel=1e-9)

def test_step_thrust_acceleration_invalid_dt():
    with pytest.raises(ValueError):
        mass.step_thrust_acceleration(0.0, 0.0, PAYLOAD, FUEL, VE, MDOT)

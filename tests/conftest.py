"""Shared fixtures: an Earth, a launch site and a few rockets."""

import numpy as np
import pytest

from icbm_sim.earth import Earth
from icbm_sim.rocket import Rocket, RocketParameters, straight_line_direction


@pytest.fixture
def earth():
    return Earth()


@pytest.fixture
def launch_site(earth):
    return earth.geo_to_position(0.0, 0.0)


@pytest.fixture
def target_site(earth):
    return earth.geo_to_position(0.0, 30.0)


@pytest.fixture
def target_direction(launch_site, target_site):
    direction, _ = straight_line_direction(launch_site, target_site)
    return direction


@pytest.fixture
def lifting_params():
    """Lifts off, turns toward the target after 2 km, burns for 100 s."""
    return RocketParameters(
        start_incline_after_distance=2.0,
        thrust_incline_max_duration=100.0,
        thrust_incline_velocity=np.radians(0.5),
        fuel_mass=10000.0,
        exhaust_velocity=3.0,
        mass_flow_rate=100.0,
    )


@pytest.fixture
def vertical_params():
    """Lifts off straight up, burns for 20 s and falls back."""
    return RocketParameters(
        start_incline_after_distance=2.0,
        thrust_incline_max_duration=100.0,
        thrust_incline_velocity=0.0,
        fuel_mass=2000.0,
        exhaust_velocity=3.0,
        mass_flow_rate=100.0,
    )


@pytest.fixture
def lobbing_params():
    """Short burn with a 2 deg/s turn: a suborbital hop that lands downrange."""
    return RocketParameters(
        start_incline_after_distance=1.0,
        thrust_incline_max_duration=100.0,
        thrust_incline_velocity=np.radians(2.0),
        fuel_mass=2000.0,
        exhaust_velocity=3.0,
        mass_flow_rate=100.0,
    )


@pytest.fixture
def weak_params():
    """Thrust never overcomes gravity."""
    return RocketParameters(
        start_incline_after_distance=2.0,
        thrust_incline_max_duration=100.0,
        thrust_incline_velocity=0.0,
        fuel_mass=1000.0,
        exhaust_velocity=1.0,
        mass_flow_rate=1.0,
    )


@pytest.fixture
def make_rocket(earth, launch_site, target_direction):
    def _make(params):
        return Rocket(earth, launch_site, target_direction, params)
    return _make

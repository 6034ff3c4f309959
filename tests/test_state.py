import pytest
import numpy as np
from icbm_sim import state


@pytest.fixture
def default_state():
    return state.RocketState()

@pytest.fixture
def custom_state():
    return state.RocketState(
        position=np.array([6378.0, 0.0, 0.0]),
        velocity=np.array([3.0, 4.0, 0.0]),
        altitude=12.5,
        mass=2500.0,
        flight_time=42.0,
        travelled_distance=np.array([3.0, 4.0, 12.0]),
    )

def test_state_init_types(default_state):
    for attr in ['position', 'velocity', 'thrust', 'gravity', 'travelled_distance']:
        value = getattr(default_state, attr)
        assert isinstance(value, np.ndarray)
        assert value.dtype == np.float64
        assert value.shape == (3,)
    assert default_state.has_landed is False

def test_list_inputs_are_converted():
    s = state.RocketState(position=[1, 2, 3])
    assert s.position.dtype == np.float64

def test_speed(custom_state):
    assert custom_state.speed == pytest.approx(5.0)

def test_travelled_distance_km(custom_state):
    assert custom_state.travelled_distance_km == pytest.approx(13.0)

def test_state_copy(custom_state):
    s2 = custom_state.copy()
    assert np.allclose(s2.position, custom_state.position)
    assert s2.mass == custom_state.mass
    assert s2.flight_time == custom_state.flight_time
    # Ensure deep copy
    s2.position[0] += 1
    s2.travelled_distance[0] += 1
    assert not np.allclose(s2.position, custom_state.position)
    assert not np.allclose(s2.travelled_distance, custom_state.travelled_distance)

def test_str(custom_state):
    text = str(custom_state)
    assert "t=42.0s" in text
    assert "alt=12.50km" in text

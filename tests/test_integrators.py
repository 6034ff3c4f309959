import pytest
import numpy as np
from icbm_sim import integrators


P = np.array([6378.0, 0.0, 0.0])
V = np.array([0.0, 1.0, 0.0])
A = np.array([-0.01, 0.0, 0.0])


def test_semi_implicit_uses_updated_velocity():
    p2, v2 = integrators.semi_implicit_euler_step(P, V, A, 2.0)
    np.testing.assert_allclose(v2, [-0.02, 1.0, 0.0])
    np.testing.assert_allclose(p2, P + v2 * 2.0)

def test_inputs_not_mutated():
    p = P.copy()
    v = V.copy()
    integrators.semi_implicit_euler_step(p, v, A, 1.0)
    np.testing.assert_array_equal(p, P)
    np.testing.assert_array_equal(v, V)

@pytest.mark.parametrize("dt", [0.0, -1.0])
def test_invalid_dt(dt):
    with pytest.raises(ValueError):
        integrators.semi_implicit_euler_step(P, V, A, dt)

def test_invalid_shape():
    with pytest.raises(ValueError):
        integrators.semi_implicit_euler_step(P, V, np.zeros(2), 1.0)

def test_nan_acceleration():
    with pytest.raises(ValueError):
        integrators.semi_implicit_euler_step(P, V, np.array([np.nan, 0.0, 0.0]), 1.0)

def test_semi_implicit_bounded_energy_on_circular_orbit():
    """Symplectic Euler keeps the radius of a circular orbit bounded."""
    mu = 1.0
    p = np.array([1.0, 0.0, 0.0])
    v = np.array([0.0, 1.0, 0.0])
    for _ in range(5000):
        a = -mu * p / np.linalg.norm(p) ** 3
        p, v = integrators.semi_implicit_euler_step(p, v, a, 0.01)
    assert np.linalg.norm(p) == pytest.approx(1.0, abs=0.05)

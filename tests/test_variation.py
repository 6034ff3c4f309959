"""Tests for the variation strategies."""

import numpy as np
import pytest

from icbm_sim.genome import GenomeConstraint
from icbm_sim.validation import ConfigurationError
from icbm_sim.variation import (
    DifferentialMutation, SinglePointCrossover, UniformPerturbation,
)

CONSTRAINTS = [GenomeConstraint(0.0, 10.0) for _ in range(6)]


@pytest.fixture
def rng():
    return np.random.default_rng(42)


def test_single_point_crossover_halves(rng):
    a = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0])
    b = np.array([2.0, 2.0, 2.0, 2.0, 2.0, 2.0])
    child = SinglePointCrossover().create_child([a, b], CONSTRAINTS, rng)
    np.testing.assert_array_equal(child, [1.0, 1.0, 1.0, 2.0, 2.0, 2.0])

def test_single_point_crossover_odd_length(rng):
    constraints = CONSTRAINTS[:5]
    child = SinglePointCrossover().create_child(
        [np.zeros(5), np.ones(5)], constraints, rng)
    # floor(5 / 2) genes from the first parent
    np.testing.assert_array_equal(child, [0.0, 0.0, 1.0, 1.0, 1.0])

def test_crossover_does_not_mutate_parents(rng):
    a = np.full(6, 3.0)
    b = np.full(6, 4.0)
    SinglePointCrossover().create_child([a, b], CONSTRAINTS, rng)
    np.testing.assert_array_equal(a, np.full(6, 3.0))

def test_wrong_parent_count(rng):
    with pytest.raises(ValueError):
        SinglePointCrossover().create_child([np.zeros(6)], CONSTRAINTS, rng)
    with pytest.raises(ValueError):
        DifferentialMutation(0.9, 0.4).create_child([np.zeros(6)] * 2, CONSTRAINTS, rng)

def test_parents_required():
    assert SinglePointCrossover.parents_required == 2
    assert DifferentialMutation(0.9, 0.4).parents_required == 3

def test_differential_mutation_cr_one(rng):
    """CR = 1 replaces every gene with a + F(b - c)."""
    a = np.full(6, 5.0)
    b = np.full(6, 3.0)
    c = np.full(6, 1.0)
    child = DifferentialMutation(1.0, 0.5).create_child([a, b, c], CONSTRAINTS, rng)
    np.testing.assert_allclose(child, np.full(6, 6.0))

def test_differential_mutation_cr_zero(rng):
    """CR = 0 keeps parent a."""
    a = np.arange(6, dtype=float)
    child = DifferentialMutation(0.0, 0.5).create_child(
        [a, np.full(6, 9.0), np.zeros(6)], CONSTRAINTS, rng)
    np.testing.assert_array_equal(child, a)

def test_differential_mutation_clamps(rng):
    a = np.full(6, 9.0)
    b = np.full(6, 10.0)
    c = np.zeros(6)
    child = DifferentialMutation(1.0, 2.0).create_child([a, b, c], CONSTRAINTS, rng)
    np.testing.assert_array_equal(child, np.full(6, 10.0))

def test_differential_mutation_identical_partners(rng):
    """b == c leaves a unchanged whatever CR is."""
    a = np.linspace(1.0, 6.0, 6)
    b = np.full(6, 4.0)
    child = DifferentialMutation(1.0, 0.4).create_child([a, b, b], CONSTRAINTS, rng)
    np.testing.assert_allclose(child, a)

def test_children_always_within_bounds(rng):
    strategy = DifferentialMutation(0.9, 0.4)
    for _ in range(200):
        parents = [rng.uniform(0.0, 10.0, 6) for _ in range(3)]
        child = strategy.create_child(parents, CONSTRAINTS, rng)
        assert np.all(child >= 0.0) and np.all(child <= 10.0)

def test_invalid_differential_parameters():
    with pytest.raises(ConfigurationError):
        DifferentialMutation(1.5, 0.4)
    with pytest.raises(ConfigurationError):
        DifferentialMutation(0.9, -0.1)

def test_uniform_perturbation_range(rng):
    perturb = UniformPerturbation(-2.0, 2.0)
    values = [perturb(rng) for _ in range(500)]
    assert min(values) >= -2.0
    assert max(values) <= 2.0
    assert min(values) < -1.0 < 1.0 < max(values)

def test_uniform_perturbation_invalid():
    with pytest.raises(ConfigurationError):
        UniformPerturbation(1.0, -1.0)

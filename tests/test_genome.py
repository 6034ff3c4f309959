import numpy as np
import pytest

from icbm_sim.genome import (
    Genome, GenomeConstraint, clamp_genes, random_genome, validate_constraints,
)
from icbm_sim.validation import ConfigurationError

CONSTRAINTS = [GenomeConstraint(0.0, 1.0), GenomeConstraint(-5.0, 5.0), GenomeConstraint(10.0, 20.0)]


def test_constraint_invalid_bounds():
    with pytest.raises(ConfigurationError):
        GenomeConstraint(2.0, 1.0)

def test_constraint_clamp():
    c = GenomeConstraint(-1.0, 1.0)
    assert c.clamp(5.0) == 1.0
    assert c.clamp(-5.0) == -1.0
    assert c.clamp(0.25) == 0.25

def test_constraint_sample_within_bounds():
    c = GenomeConstraint(3.0, 4.0)
    rng = np.random.default_rng(1)
    samples = [c.sample(rng) for _ in range(200)]
    assert all(c.contains(s) for s in samples)

def test_genome_defaults():
    g = Genome([1, 2, 3])
    assert g.genes.dtype == np.float64
    assert g.fitness == float('inf')
    assert not g.evaluated
    assert len(g) == 3
    assert g[1] == 2.0

def test_genome_copy_is_deep():
    g = Genome(np.array([1.0, 2.0]), fitness=3.0, evaluated=True)
    c = g.copy()
    c.genes[0] = 99.0
    assert g.genes[0] == 1.0
    assert c.fitness == 3.0 and c.evaluated

def test_validate_constraints():
    assert validate_constraints(CONSTRAINTS, 3)
    with pytest.raises(ConfigurationError):
        validate_constraints(CONSTRAINTS, 6)

def test_clamp_genes():
    clamped = clamp_genes(np.array([2.0, -9.0, 15.0]), CONSTRAINTS)
    np.testing.assert_array_equal(clamped, [1.0, -5.0, 15.0])

def test_random_genome_within_bounds():
    rng = np.random.default_rng(7)
    for _ in range(100):
        g = random_genome(CONSTRAINTS, rng)
        assert all(c.contains(x) for c, x in zip(CONSTRAINTS, g.genes))
        assert not g.evaluated

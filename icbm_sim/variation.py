"""
ICBM Trajectory Optimizer - Variation Strategies

A VariationStrategy turns parent gene vectors into one child gene vector.
The optimizer is composed with a strategy instead of being subclassed:

- SinglePointCrossover: plain genetic algorithm
- DifferentialMutation: differential evolution (DE/rand/1/bin style)

Children are always clamped into the gene bounds.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .genome import GenomeConstraint, clamp_genes
from .validation import ConfigurationError, check_fraction


class VariationStrategy(ABC):
    """Creates a child from parents drawn from the current population."""

    #: Number of parents create_child expects. The first parent is the
    #: population member being replaced, the rest are random picks.
    parents_required: int = 2

    @abstractmethod
    def create_child(self, parents: Sequence[np.ndarray],
                     constraints: Sequence[GenomeConstraint],
                     rng: np.random.Generator) -> np.ndarray:
        """Return a new gene vector within the constraints."""

    def _check_parents(self, parents: Sequence[np.ndarray]):
        if len(parents) != self.parents_required:
            raise ValueError(
                f"{type(self).__name__} needs {self.parents_required} parents, "
                f"got {len(parents)}"
            )


class SinglePointCrossover(VariationStrategy):
    """First half of parent A followed by the second half of parent B."""

    parents_required = 2

    def create_child(self, parents, constraints, rng):
        self._check_parents(parents)
        genome_a, genome_b = parents
        mid = len(genome_a) // 2
        child = np.concatenate([genome_a[:mid], genome_b[mid:]])
        return clamp_genes(child, constraints)


class DifferentialMutation(VariationStrategy):
    """
    Differential mutation crossover.

    For each gene, with probability cr:
        child[i] = a[i] + F * (b[i] - c[i])
    otherwise child[i] = a[i]. b and c are random population members and may
    coincide with each other or with a.

    Args:
        cr: Crossover probability CR in [0, 1]
        scaling_factor: Differential weight F
    """

    parents_required = 3

    def __init__(self, cr: float, scaling_factor: float):
        check_fraction("cr", cr)
        if scaling_factor < 0.0:
            raise ConfigurationError(f"scaling_factor must be non-negative, got {scaling_factor}")
        self.cr = cr
        self.scaling_factor = scaling_factor

    def create_child(self, parents, constraints, rng):
        self._check_parents(parents)
        genome_a, genome_b, genome_c = parents
        mask = rng.random(len(genome_a)) < self.cr
        mutant = genome_a + self.scaling_factor * (genome_b - genome_c)
        child = np.where(mask, mutant, genome_a)
        return clamp_genes(child, constraints)

    def __repr__(self) -> str:
        return f"DifferentialMutation(cr={self.cr}, scaling_factor={self.scaling_factor})"


class UniformPerturbation:
    """Mutation perturbation drawn uniformly from [low, high]."""

    def __init__(self, low: float, high: float):
        if low > high:
            raise ConfigurationError(f"low {low} exceeds high {high}")
        self.low = low
        self.high = high

    def __call__(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.low, self.high))

    def __repr__(self) -> str:
        return f"UniformPerturbation({self.low}, {self.high})"

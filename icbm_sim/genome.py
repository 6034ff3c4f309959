"""
ICBM Trajectory Optimizer - Genome Representation

A genome is a fixed-length vector of bounded real genes plus its fitness
(lower is better). Simulation diagnostics are kept by the optimizer next to
the population, not attached to the genome.
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .validation import check_bounds, check_constraints_length


@dataclass(frozen=True)
class GenomeConstraint:
    """Inclusive [min, max] bound of one gene."""
    min: float
    max: float

    def __post_init__(self):
        check_bounds(self.min, self.max)

    def clamp(self, value: float) -> float:
        return float(min(self.max, max(self.min, value)))

    def sample(self, rng: np.random.Generator) -> float:
        """Draw a value uniformly from the bound."""
        return float(rng.uniform(self.min, self.max))

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass
class Genome:
    """
    Candidate solution.

    Attributes:
        genes: Gene values [n]
        fitness: Fitness score, inf until evaluated (lower is better)
        evaluated: Whether fitness holds a computed value
    """
    genes: np.ndarray
    fitness: float = float('inf')
    evaluated: bool = False

    def __post_init__(self):
        self.genes = np.array(self.genes, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.genes)

    def __getitem__(self, index):
        return self.genes[index]

    def copy(self) -> 'Genome':
        """Deep copy, keeping the fitness."""
        return Genome(self.genes.copy(), self.fitness, self.evaluated)

    def __str__(self) -> str:
        genes = ", ".join(f"{g:.4g}" for g in self.genes)
        return f"Genome([{genes}], fitness={self.fitness:.4f})"


def validate_constraints(constraints: Sequence[GenomeConstraint],
                         genome_length: int) -> bool:
    """Fail fast unless there is one valid constraint per gene."""
    check_constraints_length(constraints, genome_length)
    for c in constraints:
        check_bounds(c.min, c.max)
    return True


def clamp_genes(genes: np.ndarray,
                constraints: Sequence[GenomeConstraint]) -> np.ndarray:
    """Clamp every gene into its bound."""
    lower = np.array([c.min for c in constraints])
    upper = np.array([c.max for c in constraints])
    return np.clip(genes, lower, upper)


def random_genome(constraints: Sequence[GenomeConstraint],
                  rng: np.random.Generator) -> Genome:
    """Genome with every gene drawn uniformly from its bound."""
    return Genome(np.array([c.sample(rng) for c in constraints]))

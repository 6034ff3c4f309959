"""
ICBM Trajectory Optimizer - Configuration

This module provides frozen dataclasses for dependency injection, allowing
different optimizer, solver and flight parameters to be passed without
modifying global constants.

Create modified configs via dataclasses.replace().
"""

from dataclasses import dataclass, fields
from typing import List, Optional

import numpy as np

from . import constants as C
from .genome import GenomeConstraint
from .validation import ConfigurationError, check_fraction, check_positive


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Immutable tuning of one genetic optimizer run.

    Attributes:
        max_generations: Generation cap
        population_size: Genomes kept after every selection
        mutation_rate: Probability that a new child is mutated
        best_survive_percent: Fraction of the sorted population that always
            survives selection; the rest is sampled from the tail
        elite: Fraction of the population copied unchanged to the next
            generation
        genome_length: Number of genes
        reevaluate: Re-run the fitness function on genomes that already
            carry a fitness (only useful for non-deterministic fitness)
    """
    max_generations: int = C.MAX_GENERATIONS
    population_size: int = C.POPULATION_SIZE
    mutation_rate: float = C.MUTATION_RATE
    best_survive_percent: float = C.BEST_SURVIVE_PERCENT
    elite: float = C.ELITE
    genome_length: int = C.GENOME_LENGTH
    reevaluate: bool = False

    def __post_init__(self):
        check_positive("max_generations", self.max_generations)
        check_positive("population_size", self.population_size)
        check_positive("genome_length", self.genome_length)
        check_fraction("mutation_rate", self.mutation_rate)
        check_fraction("best_survive_percent", self.best_survive_percent)
        check_fraction("elite", self.elite)


@dataclass(frozen=True)
class RocketConstraints:
    """Bounds of the six rocket genes, in RocketParameters.GENE_ORDER."""
    start_incline_after_distance: GenomeConstraint
    thrust_incline_max_duration: GenomeConstraint
    thrust_incline_velocity: GenomeConstraint
    fuel_mass: GenomeConstraint
    exhaust_velocity: GenomeConstraint
    mass_flow_rate: GenomeConstraint

    def as_list(self) -> List[GenomeConstraint]:
        return [getattr(self, f.name) for f in fields(self)]


@dataclass(frozen=True)
class FlightConstraints:
    """
    Stop conditions of a simulated flight.

    Attributes:
        max_flight_time_seconds: Time budget (s)
        max_distance_threshold: Travelled-distance limit (km), None disables
        max_altitude: Altitude ceiling (km), None disables
    """
    max_flight_time_seconds: float = C.MAX_FLIGHT_TIME
    max_distance_threshold: Optional[float] = None
    max_altitude: Optional[float] = None

    def __post_init__(self):
        check_positive("max_flight_time_seconds", self.max_flight_time_seconds)


@dataclass(frozen=True)
class SolverConfig:
    """
    Immutable configuration of a trajectory solve.

    Section grouping:
      1. Optimizer tuning
      2. Differential evolution
      3. Convergence
      4. Flight model
      5. Objective
      6. Execution
    """

    # ── 1. Optimizer tuning ──────────────────────────────────────────────
    max_generations: int = C.MAX_GENERATIONS
    population_size: int = C.POPULATION_SIZE
    population_size_accurate: int = C.POPULATION_SIZE_ACCURATE
    mutation_rate: float = C.MUTATION_RATE
    best_survive_percent: float = C.BEST_SURVIVE_PERCENT
    elite: float = C.ELITE
    mutation_low: float = C.MUTATION_LOW
    mutation_high: float = C.MUTATION_HIGH

    # ── 2. Differential evolution ────────────────────────────────────────
    crossover_probability: float = C.CROSSOVER_PROBABILITY
    scaling_factor: float = C.SCALING_FACTOR

    # ── 3. Convergence (None disables the plateau detector) ──────────────
    plateau_threshold: float = C.PLATEAU_THRESHOLD
    plateau_patience: Optional[int] = C.PLATEAU_PATIENCE

    # ── 4. Flight model ──────────────────────────────────────────────────
    step: float = C.DT
    payload_mass: float = C.PAYLOAD_MASS
    # Rotate the target with the Earth during the flight time
    account_for_earth_rotation: bool = False

    # ── 5. Objective ─────────────────────────────────────────────────────
    # Seconds of flight time are multiplied by this weight and added to the
    # miss distance (km) when minimizing flight time.
    flight_time_weight: float = C.FLIGHT_TIME_WEIGHT

    # ── 6. Execution ─────────────────────────────────────────────────────
    seed: Optional[int] = None
    workers: Optional[int] = None

    def __post_init__(self):
        check_positive("step", self.step)
        check_fraction("crossover_probability", self.crossover_probability)
        if self.mutation_low > self.mutation_high:
            raise ConfigurationError(
                f"mutation_low {self.mutation_low} exceeds mutation_high {self.mutation_high}"
            )
        if self.plateau_patience is not None:
            check_positive("plateau_patience", self.plateau_patience)

    def optimizer_config(self, increase_accuracy: bool = False) -> OptimizerConfig:
        """Optimizer tuning for a six-gene rocket genome."""
        size = self.population_size_accurate if increase_accuracy else self.population_size
        return OptimizerConfig(
            max_generations=self.max_generations,
            population_size=size,
            mutation_rate=self.mutation_rate,
            best_survive_percent=self.best_survive_percent,
            elite=self.elite,
            genome_length=C.GENOME_LENGTH,
        )


def default_rocket_constraints() -> RocketConstraints:
    """Launcher bounds for the six rocket genes."""
    return RocketConstraints(
        start_incline_after_distance=GenomeConstraint(1.0, 4.0),
        thrust_incline_max_duration=GenomeConstraint(10.0, 40 * 60.0),
        thrust_incline_velocity=GenomeConstraint(0.0, float(np.radians(20.0))),
        fuel_mass=GenomeConstraint(300.0, 70000.0),
        exhaust_velocity=GenomeConstraint(1.0, 3.0),
        mass_flow_rate=GenomeConstraint(1.0, 100.0),
    )


def default_flight_constraints(straight_line_distance: float) -> FlightConstraints:
    """Launcher flight constraints for a start->target distance (km)."""
    return FlightConstraints(
        max_flight_time_seconds=C.MAX_FLIGHT_TIME,
        max_distance_threshold=straight_line_distance * C.MAX_DISTANCE_FACTOR,
        max_altitude=C.MAX_ALTITUDE,
    )


def create_default_config() -> SolverConfig:
    """Create a SolverConfig with default values from constants."""
    return SolverConfig()


def create_test_config(max_generations: int = 5, population_size: int = 12,
                       **overrides) -> SolverConfig:
    """Create a fast config suitable for testing.

    Any keyword arg accepted by SolverConfig can be passed as an override.
    """
    defaults = dict(max_generations=max_generations,
                    population_size=population_size,
                    population_size_accurate=population_size * 2,
                    seed=0)
    defaults.update(overrides)
    return SolverConfig(**defaults)

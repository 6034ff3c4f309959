"""
ICBM Trajectory Optimizer Package

Differential-evolution search for the launch parameters of a point-mass
rocket flying between two points on a spherical, rotating Earth.

Modules:
    - constants: Physical constants, launcher defaults and optimizer tuning
    - frames: Vector helpers (normalization, rotations, projections)
    - earth: Earth model (gravity, altitude, geographic coordinates)
    - mass: Closed-form propellant depletion and thrust law
    - state: Rocket state dataclass
    - rocket: Rocket flight model with the gravity turn
    - integrators: Semi-implicit Euler integration
    - simulation: Flight loop with stop conditions
    - genome: Genome and gene bounds
    - variation: Crossover and differential mutation strategies
    - termination: Convergence conditions and cancellation
    - optimizer: Genetic optimizer
    - solver: Trajectory solver binding the optimizer to the flight model
    - plotting: Report plots
    - cli: Command-line entry point
"""

from .earth import Earth
from .rocket import Rocket, RocketParameters
from .simulation import FlightLog, FlightResult, StopReason, simulate_flight
from .genome import Genome, GenomeConstraint
from .variation import DifferentialMutation, SinglePointCrossover, VariationStrategy
from .termination import CancellationToken, ConvergencePlateau, FitnessTarget
from .optimizer import FitnessEvaluation, GeneticOptimizer, OptimizationResult, RunStatus
from .solver import TrajectoryResult, TrajectorySolver, create_scenario_solver
from .config import (
    FlightConstraints, OptimizerConfig, RocketConstraints, SolverConfig,
    create_default_config, create_test_config,
)
from .validation import ConfigurationError

__version__ = "1.0.0"
__author__ = "ICBM Simulation Team"

__all__ = [
    'Earth',
    'Rocket',
    'RocketParameters',
    'FlightLog',
    'FlightResult',
    'StopReason',
    'simulate_flight',
    'Genome',
    'GenomeConstraint',
    'DifferentialMutation',
    'SinglePointCrossover',
    'VariationStrategy',
    'CancellationToken',
    'ConvergencePlateau',
    'FitnessTarget',
    'FitnessEvaluation',
    'GeneticOptimizer',
    'OptimizationResult',
    'RunStatus',
    'TrajectoryResult',
    'TrajectorySolver',
    'create_scenario_solver',
    'FlightConstraints',
    'OptimizerConfig',
    'RocketConstraints',
    'SolverConfig',
    'create_default_config',
    'create_test_config',
    'ConfigurationError',
]

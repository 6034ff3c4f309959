"""
ICBM Trajectory Optimizer - Trajectory Solver

Binds the genetic optimizer to the flight model for one start->target
launch. Each genome encodes six rocket parameters (RocketParameters.GENE_ORDER);
its fitness is the distance between where a simulated flight with those
parameters stops and the target:

    fitness = |p_final - p_target|                       (km)
    fitness = |p_final - p_target| + w * flight_time     (minimize_flight_time)

The second form adds seconds to kilometres. The weight w
(SolverConfig.flight_time_weight, default 1.0) makes the trade-off explicit.

The solve uses differential evolution and stops early when the best fitness
plateaus (SolverConfig.plateau_threshold / plateau_patience).
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from . import constants as C
from .config import (
    FlightConstraints, RocketConstraints, SolverConfig,
    default_flight_constraints, default_rocket_constraints,
)
from .earth import Earth
from .genome import Genome
from .optimizer import FitnessEvaluation, GeneticOptimizer, RunStatus
from .rocket import Rocket, RocketParameters, straight_line_direction
from .simulation import FlightLog, FlightResult, StopReason, simulate_flight
from .termination import CancellationToken, ConvergencePlateau
from .types import TrajectorySummary
from .validation import ConfigurationError, check_position_set
from .variation import DifferentialMutation, UniformPerturbation

# Configure module logger
logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Genome, float], None]


@dataclass
class TrajectoryResult:
    """
    Best launch found by a solve, with the readouts of its flight.

    Attributes:
        parameters: Solved rocket parameters
        genes: Raw gene vector [6]
        fitness: Best fitness
        status: Terminal optimizer state
        generations: Completed generations
        flight_time: Simulated flight time (s)
        travelled_distance: Travelled-distance accumulator magnitude (km)
        max_altitude: Highest altitude reached (km)
        fuel_combustion_time: Burn duration (s)
        payload_mass: Payload (kg)
        fuel_mass: Loaded propellant (kg)
        miss_distance: Distance between the final position and the target (km)
        final_position: Where the flight stopped (km) [3]
        stop_reason: Why the flight stopped
        history: Best-ever fitness per generation
        ideal_delta_v: Full-burn delta-v of the solved parameters (km/s)
        apogee_layer: Atmosphere layer at the highest point of the flight
    """
    parameters: RocketParameters
    genes: np.ndarray
    fitness: float
    status: RunStatus
    generations: int
    flight_time: float
    travelled_distance: float
    max_altitude: float
    fuel_combustion_time: float
    payload_mass: float
    fuel_mass: float
    miss_distance: float
    final_position: np.ndarray
    stop_reason: StopReason
    history: List[float] = field(default_factory=list)
    thrust_incline_duration: float = 0.0
    remaining_fuel_mass: float = 0.0
    final_geo: Optional[Tuple[float, float]] = None
    elapsed_time: float = 0.0
    ideal_delta_v: float = 0.0
    apogee_layer: str = ""

    @property
    def converged(self) -> bool:
        return self.status == RunStatus.CONVERGED

    @property
    def cancelled(self) -> bool:
        return self.status == RunStatus.CANCELLED

    def summary(self) -> TrajectorySummary:
        """Flat, JSON-friendly summary of the result."""
        latitude, longitude = self.final_geo if self.final_geo is not None else (None, None)
        return TrajectorySummary(
            status=self.status.value,
            generations=self.generations,
            fitness=float(self.fitness),
            miss_distance=float(self.miss_distance),
            flight_time=float(self.flight_time),
            travelled_distance=float(self.travelled_distance),
            max_altitude=float(self.max_altitude),
            fuel_combustion_time=float(self.fuel_combustion_time),
            thrust_incline_duration=float(self.thrust_incline_duration),
            payload_mass=float(self.payload_mass),
            fuel_mass=float(self.fuel_mass),
            remaining_fuel_mass=float(self.remaining_fuel_mass),
            stop_reason=self.stop_reason.value,
            final_position=[float(x) for x in self.final_position],
            final_latitude=latitude,
            final_longitude=longitude,
            elapsed_time=float(self.elapsed_time),
            ideal_delta_v=float(self.ideal_delta_v),
            apogee_layer=self.apogee_layer,
            parameters=self.parameters.as_dict(),
        )


def _ignore_progress(best_genome: Genome, percent: float):
    pass


class TrajectorySolver:
    """
    Solver for the launch parameters that bring a rocket from start to target.

    Args:
        earth: Earth model
        start: Launch position (km) [3]
        target: Target position (km) [3]
        rocket_constraints: Bounds of the six rocket genes
            (default: default_rocket_constraints())
        flight_constraints: Stop conditions of each simulated flight
            (default: default_flight_constraints(start->target distance))
        minimize_flight_time: Add weighted flight time to the fitness
        increase_calculation_accuracy: Use the larger population size
        config: Solver configuration
        on_progress: Called once per generation with (best_genome, percent)

    start and target may be left unset at construction; calc_trajectory()
    raises ConfigurationError if they are still unset then.
    """

    def __init__(self, earth: Earth, start: Optional[np.ndarray],
                 target: Optional[np.ndarray],
                 rocket_constraints: RocketConstraints = None,
                 flight_constraints: FlightConstraints = None,
                 minimize_flight_time: bool = False,
                 increase_calculation_accuracy: bool = False,
                 config: SolverConfig = None,
                 on_progress: ProgressCallback = None):
        self.earth = earth
        self.start = start
        self.target = target
        self.rocket_constraints = rocket_constraints
        self.flight_constraints = flight_constraints
        self.minimize_flight_time = minimize_flight_time
        self.increase_calculation_accuracy = increase_calculation_accuracy
        self.config = config if config is not None else SolverConfig()
        self.on_progress = on_progress if on_progress is not None else _ignore_progress

        self.elapsed_time = 0.0
        self.optimizer: Optional[GeneticOptimizer] = None
        self._cancel_token = CancellationToken()

    # -- setup --------------------------------------------------------------------

    # Changing an input drops the resolved launch geometry; the next
    # simulation prepares again.

    @property
    def start(self) -> Optional[np.ndarray]:
        return self._start_input

    @start.setter
    def start(self, value: Optional[np.ndarray]):
        self._start_input = value
        self._invalidate()

    @property
    def target(self) -> Optional[np.ndarray]:
        return self._target_input

    @target.setter
    def target(self, value: Optional[np.ndarray]):
        self._target_input = value
        self._invalidate()

    @property
    def flight_constraints(self) -> Optional[FlightConstraints]:
        return self._flight_constraints_input

    @flight_constraints.setter
    def flight_constraints(self, value: Optional[FlightConstraints]):
        self._flight_constraints_input = value
        self._invalidate()

    def _invalidate(self):
        self._start = None
        self._target = None
        self._direction = None
        self._flight_constraints = None

    def _prepare(self):
        """Validate inputs and resolve defaults; fail fast before any search."""
        if self.earth is None:
            raise ConfigurationError("Earth must be set before calculating the trajectory")
        self._start = check_position_set("Start", self.start).copy()
        self._target = check_position_set("Target", self.target).copy()

        self._direction, distance = straight_line_direction(self._start, self._target)
        if distance < C.ZERO_TOLERANCE:
            raise ConfigurationError("Start and target positions coincide")

        if self.flight_constraints is None:
            self._flight_constraints = default_flight_constraints(distance)
        else:
            self._flight_constraints = self.flight_constraints
        if self.rocket_constraints is None:
            self.rocket_constraints = default_rocket_constraints()

    def target_at(self, flight_time: float) -> np.ndarray:
        """Target position after flight_time seconds (km)."""
        if self.config.account_for_earth_rotation:
            return self.earth.rotate_with_body(self._target, flight_time)
        return self._target

    # -- fitness ------------------------------------------------------------------

    def simulate(self, params: RocketParameters, step: float = None,
                 log: FlightLog = None) -> FlightResult:
        """Fly a fresh rocket with the given parameters."""
        if self._start is None:
            self._prepare()
        rocket = Rocket(self.earth, self._start, self._direction, params)
        return simulate_flight(rocket, self._flight_constraints,
                               step if step is not None else self.config.step, log)

    def fitness_function(self, genes: np.ndarray) -> FitnessEvaluation:
        """
        Miss distance of the flight encoded by genes (plus weighted flight
        time when minimizing flight time).
        """
        params = RocketParameters.from_genes(genes, payload_mass=self.config.payload_mass)
        flight = self.simulate(params)

        fitness = float(np.linalg.norm(flight.position - self.target_at(flight.flight_time)))
        if self.minimize_flight_time:
            fitness += self.config.flight_time_weight * flight.flight_time

        return FitnessEvaluation(fitness, flight)

    # -- solve --------------------------------------------------------------------

    def _create_optimizer(self) -> GeneticOptimizer:
        cfg = self.config
        termination = []
        if cfg.plateau_patience is not None:
            termination.append(ConvergencePlateau(cfg.plateau_threshold, cfg.plateau_patience))

        return GeneticOptimizer(
            config=cfg.optimizer_config(self.increase_calculation_accuracy),
            fitness_function=self.fitness_function,
            constraints=self.rocket_constraints.as_list(),
            strategy=DifferentialMutation(cfg.crossover_probability, cfg.scaling_factor),
            mutation_function=UniformPerturbation(cfg.mutation_low, cfg.mutation_high),
            termination=termination,
            cancel_token=self._cancel_token,
            seed=cfg.seed,
            workers=cfg.workers,
        )

    def _report_progress(self, generation: int, best_genome: Genome):
        max_generations = self.optimizer.config.max_generations
        if max_generations > 1:
            percent = min(100.0, generation * 100.0 / (max_generations - 1))
        else:
            percent = 100.0
        self.on_progress(best_genome, percent)

    async def calc_trajectory(self, yield_delay_ms: Optional[float] = None) -> TrajectoryResult:
        """
        Search for the best launch parameters.

        Args:
            yield_delay_ms: Delay awaited before each generation, None for no
                yield point

        Returns:
            TrajectoryResult of the best genome found

        Raises:
            ConfigurationError: If earth, start or target are unset
        """
        self._prepare()
        self.elapsed_time = 0.0
        start_time = time.time()

        self.optimizer = self._create_optimizer()
        logger.info(
            f"Solving trajectory: distance={np.linalg.norm(self._target - self._start):.1f}km, "
            f"population={self.optimizer.config.population_size}, "
            f"minimize_flight_time={self.minimize_flight_time}"
        )

        try:
            outcome = await self.optimizer.run(yield_delay_ms, self._report_progress)
        finally:
            self.elapsed_time = time.time() - start_time
            # A cancelled token only applies to the solve it stopped
            if self._cancel_token.cancelled:
                self._cancel_token = CancellationToken()

        flight = outcome.best_details
        if flight is None:
            flight = self.fitness_function(outcome.best.genes).details

        result = self._build_result(outcome.best, flight, outcome.status,
                                    outcome.generations, outcome.history)
        logger.info(
            f"Trajectory solved in {self.elapsed_time:.2f}s: status={result.status.value}, "
            f"miss distance={result.miss_distance:.3f}km, flight time={result.flight_time:.0f}s"
        )
        return result

    def terminate(self):
        """Cancel the running solve at the next generation boundary."""
        self._cancel_token.cancel()

    def _build_result(self, best: Genome, flight: FlightResult, status: RunStatus,
                      generations: int, history: List[float]) -> TrajectoryResult:
        rocket = flight.rocket
        params = rocket.params
        miss_distance = float(np.linalg.norm(rocket.position - self.target_at(rocket.flight_time)))
        return TrajectoryResult(
            parameters=params,
            genes=best.genes.copy(),
            fitness=best.fitness,
            status=status,
            generations=generations,
            flight_time=rocket.flight_time,
            travelled_distance=rocket.state.travelled_distance_km,
            max_altitude=rocket.max_altitude,
            fuel_combustion_time=rocket.fuel_combustion_time,
            payload_mass=params.payload_mass,
            fuel_mass=params.fuel_mass,
            miss_distance=miss_distance,
            final_position=rocket.position.copy(),
            stop_reason=flight.reason,
            history=list(history),
            thrust_incline_duration=rocket.state.current_thrust_incline_duration,
            remaining_fuel_mass=max(0.0, rocket.state.mass - params.payload_mass),
            final_geo=self.earth.position_to_geo(rocket.position),
            elapsed_time=self.elapsed_time,
            ideal_delta_v=params.ideal_delta_v,
            apogee_layer=self.earth.atmosphere_layer(rocket.max_altitude),
        )

    def replay(self, result: TrajectoryResult, step: float = None,
               log: bool = True) -> Tuple[FlightResult, Optional[FlightLog]]:
        """
        Re-fly the solved parameters, optionally recording every step.

        Args:
            result: Result of calc_trajectory()
            step: Time step (s), default the solve's step
            log: Record a FlightLog

        Returns:
            (flight, flight_log) tuple; flight_log is None if log is False
        """
        flight_log = FlightLog() if log else None
        flight = self.simulate(result.parameters, step, flight_log)
        return flight, flight_log


def create_scenario_solver(earth: Earth = None, start_latitude: float = 0.0,
                           start_longitude: float = 0.0,
                           longitude_offset: float = 180.0,
                           config: SolverConfig = None,
                           minimize_flight_time: bool = False,
                           increase_calculation_accuracy: bool = False,
                           on_progress: ProgressCallback = None) -> TrajectorySolver:
    """
    Solver for a launch from a geographic point to the same latitude,
    longitude_offset degrees further east, with the launcher defaults:
    default_rocket_constraints() and a distance threshold of
    MAX_DISTANCE_FACTOR x the straight-line distance.

    The default is the (0, 0) -> (0, 180) antipodal launch.
    """
    if earth is None:
        earth = Earth()
    start = earth.geo_to_position(start_latitude, start_longitude)
    target = earth.geo_to_position(start_latitude, start_longitude + longitude_offset)
    _, distance = straight_line_direction(start, target)

    return TrajectorySolver(
        earth=earth,
        start=start,
        target=target,
        rocket_constraints=default_rocket_constraints(),
        flight_constraints=default_flight_constraints(distance),
        minimize_flight_time=minimize_flight_time,
        increase_calculation_accuracy=increase_calculation_accuracy,
        config=config,
        on_progress=on_progress,
    )

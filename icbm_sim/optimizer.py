"""
ICBM Trajectory Optimizer - Genetic Optimizer

Population-based search minimizing a caller-supplied fitness function over
bounded real-valued genomes. The variation operator is a pluggable
VariationStrategy (single-point crossover for a plain GA, differential
mutation for DE).

Generation cycle:
    add_new_population()  ->  population grows to 2 x population_size
    selection()           ->  sorted and culled back to population_size

selection() must always follow add_new_population(); run() does both.

Run states:
    UNINITIALIZED -> RUNNING -> CONVERGED | EXHAUSTED | CANCELLED
"""

import asyncio
import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from . import constants as C
from .config import OptimizerConfig
from .genome import Genome, GenomeConstraint, random_genome, validate_constraints
from .termination import CancellationToken, TerminationCondition
from .variation import SinglePointCrossover, UniformPerturbation, VariationStrategy

# Configure module logger
logger = logging.getLogger(__name__)


class RunStatus(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class FitnessEvaluation(NamedTuple):
    """Fitness plus optional diagnostics produced while computing it."""
    fitness: float
    details: Any = None


@dataclass
class OptimizationResult:
    """
    Outcome of GeneticOptimizer.run().

    Attributes:
        status: Terminal run state
        best: Best genome seen during the run (None if no generation ran
            and the initial population was never evaluated)
        best_details: Diagnostics returned with the best genome's fitness
        generations: Number of completed generations
        history: Best-ever fitness after each completed generation
        elapsed_time: Wall-clock duration of the run (s)
    """
    status: RunStatus
    best: Optional[Genome]
    best_details: Any = None
    generations: int = 0
    history: List[float] = field(default_factory=list)
    elapsed_time: float = 0.0

    @property
    def fitness(self) -> float:
        return self.best.fitness if self.best is not None else float('inf')


GenerationCallback = Callable[[int, Genome], None]


class GeneticOptimizer:
    """
    Genetic optimizer over a fixed-size population.

    Args:
        config: Optimizer tuning
        fitness_function: Callable(genes) -> float or FitnessEvaluation.
            Called sequentially unless workers > 1; must not share mutable
            state between calls when run on a pool.
        constraints: One GenomeConstraint per gene
        strategy: Variation strategy (default single-point crossover)
        mutation_function: Callable(rng) -> perturbation added to one gene
        termination: Convergence conditions checked after each generation
        cancel_token: Cooperative cancellation flag
        seed: Random seed for reproducible runs
        workers: Thread pool size for fitness evaluation (None/1 = sequential)

    Raises:
        ConfigurationError: If the constraints do not match the genome length
    """

    def __init__(self, config: OptimizerConfig,
                 fitness_function: Callable[[np.ndarray], Any],
                 constraints: Sequence[GenomeConstraint],
                 strategy: VariationStrategy = None,
                 mutation_function: Callable[[np.random.Generator], float] = None,
                 termination: Sequence[TerminationCondition] = (),
                 cancel_token: CancellationToken = None,
                 seed: Optional[int] = None,
                 workers: Optional[int] = None):
        validate_constraints(constraints, config.genome_length)

        self.config = config
        self.fitness_function = fitness_function
        self.constraints = list(constraints)
        self.strategy = strategy if strategy is not None else SinglePointCrossover()
        if mutation_function is None:
            mutation_function = UniformPerturbation(C.MUTATION_LOW, C.MUTATION_HIGH)
        self.mutation_function = mutation_function
        self.termination = list(termination)
        self.cancel_token = cancel_token if cancel_token is not None else CancellationToken()
        self.rng = np.random.default_rng(seed)
        self.workers = workers

        self.population: List[Genome] = []
        # Diagnostics aligned index-for-index with population
        self.details: List[Any] = []
        self.status = RunStatus.UNINITIALIZED
        self.history: List[float] = []
        self.evaluations = 0
        self._best: Optional[Genome] = None
        self._best_details: Any = None

    # -- population operations --------------------------------------------------

    @staticmethod
    def pick_random_elements(items: Sequence, count: int,
                             rng: np.random.Generator) -> list:
        """
        Sample count items without replacement (partial Fisher-Yates shuffle).
        """
        pool = list(items)
        count = min(count, len(pool))
        for i in range(count):
            j = int(rng.integers(i, len(pool)))
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:count]

    def create_initial_population(self):
        """Fill the population with genomes drawn uniformly within bounds."""
        self.population = [
            random_genome(self.constraints, self.rng)
            for _ in range(self.config.population_size)
        ]
        self.details = [None] * len(self.population)

    def _evaluate(self, genes: np.ndarray) -> FitnessEvaluation:
        outcome = self.fitness_function(genes.copy())
        if not isinstance(outcome, FitnessEvaluation):
            outcome = FitnessEvaluation(float(outcome))
        fitness = float(outcome.fitness)
        if math.isnan(fitness):
            fitness = float('inf')
        return FitnessEvaluation(fitness, outcome.details)

    def calc_fitness(self):
        """
        Evaluate the fitness of every genome in the population.

        Genomes that already carry a fitness are skipped unless
        config.reevaluate is set.
        """
        pending = [
            i for i, genome in enumerate(self.population)
            if self.config.reevaluate or not genome.evaluated
        ]
        if not pending:
            return

        genes = [self.population[i].genes for i in pending]
        if self.workers is not None and self.workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = list(executor.map(self._evaluate, genes))
        else:
            outcomes = [self._evaluate(g) for g in genes]

        for i, outcome in zip(pending, outcomes):
            self.population[i].fitness = outcome.fitness
            self.population[i].evaluated = True
            self.details[i] = outcome.details
        self.evaluations += len(pending)

    def selection(self, best_survive_percent: float, population_size: int):
        """
        Cull the population back to population_size.

        The best floor(population_size * best_survive_percent) genomes always
        survive; the remaining places go to genomes sampled uniformly
        without replacement from the rest, which keeps some weak genomes
        around for diversity.
        """
        self.calc_fitness()

        order = sorted(range(len(self.population)),
                       key=lambda i: self.population[i].fitness)

        best_survive_size = int(math.floor(population_size * best_survive_percent))
        bad_survive_size = population_size - best_survive_size

        best_survive = order[:best_survive_size]
        bad_survive = self.pick_random_elements(order[best_survive_size:],
                                                bad_survive_size, self.rng)
        survivors = best_survive + sorted(bad_survive,
                                          key=lambda i: self.population[i].fitness)

        self.population, self.details = (
            [self.population[i] for i in survivors],
            [self.details[i] for i in survivors],
        )

    def crossover(self, parents: Sequence[np.ndarray]) -> np.ndarray:
        """Create a child gene vector with the variation strategy."""
        return self.strategy.create_child(parents, self.constraints, self.rng)

    def mutate(self, genes: np.ndarray) -> np.ndarray:
        """Add a random perturbation to one random gene, then clamp it."""
        index = int(self.rng.integers(len(genes)))
        genes[index] = self.constraints[index].clamp(
            genes[index] + self.mutation_function(self.rng)
        )
        return genes

    def add_new_population(self):
        """
        Append one offspring per population member.

        Members within the elite fraction are copied unchanged; every other
        member j produces a child from itself and random partners, mutated
        with probability mutation_rate. The population doubles until the
        next selection().
        """
        parents = self.population
        n = len(parents)
        elite_size = self.config.elite * n
        extra_parents = self.strategy.parents_required - 1

        offspring: List[Genome] = []
        offspring_details: List[Any] = []
        for j in range(n):
            parent_a = parents[j]

            if j < elite_size:
                offspring.append(parent_a.copy())
                offspring_details.append(self.details[j])
                continue

            partners = [parents[int(self.rng.integers(n))].genes
                        for _ in range(extra_parents)]
            child = self.crossover([parent_a.genes] + partners)

            if self.rng.random() < self.config.mutation_rate:
                child = self.mutate(child)

            offspring.append(Genome(child))
            offspring_details.append(None)

        self.population.extend(offspring)
        self.details.extend(offspring_details)

    # -- run control ------------------------------------------------------------

    @property
    def best(self) -> Optional[Genome]:
        """Best genome seen so far in the current run."""
        return self._best

    @property
    def best_details(self) -> Any:
        return self._best_details

    def _record_best(self):
        current = self.population[0]
        if self._best is None or current.fitness < self._best.fitness:
            self._best = current.copy()
            self._best_details = self.details[0]

    def _record_initial_best(self):
        index = min(range(len(self.population)),
                    key=lambda i: self.population[i].fitness)
        self._best = self.population[index].copy()
        self._best_details = self.details[index]

    def terminate(self):
        """Request cancellation; observed at the top of the next generation."""
        self.cancel_token.cancel()

    async def run(self, delay_ms: Optional[float] = None,
                  on_generation: Optional[GenerationCallback] = None) -> OptimizationResult:
        """
        Evolve the population until a termination condition is met.

        Args:
            delay_ms: If not None, await this many milliseconds before each
                generation so a host event loop stays responsive
            on_generation: Called synchronously after each generation with
                (generation_index, current_best_genome)

        Returns:
            OptimizationResult with the terminal status and best-ever genome
        """
        start = time.time()
        self.status = RunStatus.RUNNING
        self.history = []
        self._best = None
        self._best_details = None
        for condition in self.termination:
            condition.reset()

        self.create_initial_population()
        self.calc_fitness()
        self._record_initial_best()

        logger.info(
            f"Starting optimizer: population={self.config.population_size}, "
            f"max_generations={self.config.max_generations}, "
            f"strategy={type(self.strategy).__name__}"
        )

        status = RunStatus.EXHAUSTED
        generations = 0
        for generation in range(self.config.max_generations):
            if self.cancel_token.cancelled:
                status = RunStatus.CANCELLED
                break

            if delay_ms is not None:
                await asyncio.sleep(delay_ms / 1000.0)

            self.add_new_population()
            self.selection(self.config.best_survive_percent, self.config.population_size)
            generations = generation + 1

            self._record_best()
            self.history.append(self._best.fitness)
            logger.debug(f"Generation {generation}: best fitness {self.population[0].fitness:.6f}")

            if on_generation is not None:
                on_generation(generation, self.population[0])

            stops = [c.update(generation, self.population[0].fitness)
                     for c in self.termination]
            if any(stops):
                status = RunStatus.CONVERGED
                break

        self.status = status
        elapsed = time.time() - start
        logger.info(
            f"Optimizer finished: status={status.value}, generations={generations}, "
            f"best fitness={self._best.fitness:.6f}, evaluations={self.evaluations}, "
            f"elapsed={elapsed:.2f}s"
        )

        return OptimizationResult(
            status=status,
            best=self._best,
            best_details=self._best_details,
            generations=generations,
            history=list(self.history),
            elapsed_time=elapsed,
        )

    def run_sync(self, delay_ms: Optional[float] = None,
                 on_generation: Optional[GenerationCallback] = None) -> OptimizationResult:
        """Blocking wrapper around run() for callers without an event loop."""
        return asyncio.run(self.run(delay_ms, on_generation))

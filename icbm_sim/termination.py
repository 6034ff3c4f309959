"""
ICBM Trajectory Optimizer - Termination Conditions

Pluggable stop conditions checked by the optimizer after every generation,
plus the cooperative cancellation token observed at the top of every
generation. Neither ever raises.
"""

import math
import threading
from typing import Optional


class CancellationToken:
    """
    Cooperative cancellation flag.

    Thread-safe, so a solve running in a worker thread can be cancelled
    from another thread. Cancellation is only observed between generations.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


class TerminationCondition:
    """
    Base class of convergence checks.

    update() is called once per generation with the best fitness of the
    current population and returns True when the run should stop as
    converged.
    """

    def reset(self):
        """Forget all history; called when a run starts."""

    def update(self, generation: int, best_fitness: float) -> bool:
        raise NotImplementedError


class ConvergencePlateau(TerminationCondition):
    """
    Stop when the best-ever fitness improves by less than threshold for
    patience consecutive generations.

    Args:
        threshold: Minimum improvement that resets the counter (km)
        patience: Consecutive stalled generations before stopping
    """

    def __init__(self, threshold: float = 0.001, patience: int = 20):
        if patience < 1:
            raise ValueError(f"patience must be at least 1, got {patience}")
        self.threshold = threshold
        self.patience = patience
        self.reset()

    def reset(self):
        self.best: Optional[float] = None
        self.stalled = 0

    def update(self, generation: int, best_fitness: float) -> bool:
        if self.best is None or not math.isfinite(self.best):
            self.best = best_fitness
            self.stalled = 0
            return False

        improvement = self.best - best_fitness
        if improvement < self.threshold:
            self.stalled += 1
        else:
            self.stalled = 0
        self.best = min(self.best, best_fitness)
        return self.stalled >= self.patience

    def __repr__(self) -> str:
        return f"ConvergencePlateau(threshold={self.threshold}, patience={self.patience})"


class FitnessTarget(TerminationCondition):
    """Stop as soon as the best fitness reaches target."""

    def __init__(self, target: float):
        self.target = target

    def update(self, generation: int, best_fitness: float) -> bool:
        return best_fitness <= self.target

    def __repr__(self) -> str:
        return f"FitnessTarget({self.target})"

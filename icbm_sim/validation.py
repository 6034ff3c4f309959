"""
ICBM Trajectory Optimizer - Configuration Checks

Fatal configuration checks run before any optimization starts. A failed
check raises ConfigurationError; nothing tries to recover a partial solve.
"""

from typing import Optional, Sequence

import numpy as np


class ConfigurationError(ValueError):
    """Raised when an optimizer or solver is configured inconsistently."""
    pass


def check_bounds(minimum: float, maximum: float) -> bool:
    """
    Check a single [min, max] gene bound.

    Returns:
        True if valid, raises ConfigurationError otherwise
    """
    if not (np.isfinite(minimum) and np.isfinite(maximum)):
        raise ConfigurationError(
            f"Gene bounds must be finite, got [{minimum}, {maximum}]"
        )
    if minimum > maximum:
        raise ConfigurationError(
            f"Gene lower bound {minimum} exceeds upper bound {maximum}"
        )
    return True


def check_constraints_length(constraints: Sequence, genome_length: int) -> bool:
    """
    Check that there is exactly one constraint per gene.

    Returns:
        True if valid, raises ConfigurationError otherwise
    """
    if len(constraints) != genome_length:
        raise ConfigurationError(
            f"Genome constraints length {len(constraints)} must be equal to "
            f"genome length {genome_length}"
        )
    return True


def check_fraction(name: str, value: float) -> bool:
    """Check that a rate/percentage lies in [0, 1]."""
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
    return True


def check_positive(name: str, value: float) -> bool:
    """Check that a size, count or step is strictly positive."""
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return True


def check_position_set(name: str, position: Optional[np.ndarray]) -> np.ndarray:
    """
    Check that a 3D position has been provided.

    Returns:
        The position as a float64 array
    """
    if position is None:
        raise ConfigurationError(
            f"{name} position must be set before calculating the trajectory"
        )
    arr = np.asarray(position, dtype=np.float64)
    if arr.shape != (3,) or not np.all(np.isfinite(arr)):
        raise ConfigurationError(
            f"{name} position must be a finite 3D vector, got {position!r}"
        )
    return arr

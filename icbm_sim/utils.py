"""
ICBM Trajectory Optimizer - Utility Functions

Formatting helpers for the command-line summary.
"""

from typing import Tuple

SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 60.0 * 60.0
SECONDS_PER_DAY = 60.0 * 60.0 * 24.0


def format_duration(seconds: float) -> Tuple[float, str]:
    """
    Express a duration in the largest whole unit it reaches.

    Returns:
        (value, unit) with unit one of 'seconds', 'min', 'hr', 'day'.
        Values in min/hr/day are rounded to 2 decimals; seconds are
        returned unchanged.
    """
    if seconds >= SECONDS_PER_DAY:
        return round(seconds / SECONDS_PER_DAY, 2), 'day'
    if seconds >= SECONDS_PER_HOUR:
        return round(seconds / SECONDS_PER_HOUR, 2), 'hr'
    if seconds >= SECONDS_PER_MINUTE:
        return round(seconds / SECONDS_PER_MINUTE, 2), 'min'
    return seconds, 'seconds'


def format_duration_str(seconds: float) -> str:
    value, unit = format_duration(seconds)
    return f"{value:g} {unit}"

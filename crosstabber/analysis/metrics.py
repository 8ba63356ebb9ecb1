"""Low-level arithmetic helpers for crosstab analysis.

Pure functions, no I/O, no models.  Higher-level code (statistics, insights,
templates) calls these.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity.

    Python's ``round()`` uses banker's rounding (``round(150.5) == 150``);
    index and percentage displays expect ``150.5 -> 151`` and ``-0.5 -> 0``.
    """
    return math.floor(value + 0.5)


def mean(values: Sequence[float]) -> float | None:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def spread(values: Sequence[float]) -> float:
    """max - min of a non-empty sequence; 0 for an empty one."""
    if not values:
        return 0.0
    return max(values) - min(values)


def share(part: int, total: int) -> float:
    """Fraction ``part / total``, 0 when *total* is 0."""
    if total == 0:
        return 0.0
    return part / total


def mean_deviation_from_baseline(indexes: Sequence[float], baseline: float = 100.0) -> float:
    """Mean absolute distance of indexes from the baseline (100).

    Returns 0 for an empty sequence.
    """
    if not indexes:
        return 0.0
    return sum(abs(i - baseline) for i in indexes) / len(indexes)


def percent_of(part: float, whole: float) -> int:
    """``part`` as a rounded percentage of ``whole``; 0 when *whole* is 0."""
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)

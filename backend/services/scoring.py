"""Numeric helpers shared by every scoring module.

All integer conversions round half up (``2.5 -> 3``), matching how the
dashboards have always displayed scores. Python's built-in ``round`` uses
banker's rounding and must not be used for score output.
"""

import math
from collections.abc import Iterable


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` half up to ``digits`` decimals."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """Round half up and clamp into the 0-100 score range."""
    return int(clamp(round_int(value), 0, 100))


def pct(part: float, total: float) -> float:
    """Percentage of ``part`` in ``total``; 0 when ``total`` is not positive."""
    if total <= 0:
        return 0.0
    return part / total * 100


def safe_ratio(part: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return part / total


def mean_or(values: Iterable[float], default: float) -> float:
    items = list(values)
    if not items:
        return default
    return sum(items) / len(items)


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

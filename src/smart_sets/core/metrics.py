"""
Pure numeric helpers: least-squares fit, spread and rounding.

All functions are pure and never raise for short or degenerate input.
"""

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RegressionResult:
    """Least-squares line y = intercept + slope * x and its fit quality."""

    slope: float
    intercept: float
    r_squared: float


def linear_regression(points: Sequence[tuple[float, float]]) -> RegressionResult:
    """
    Fit a least-squares line through (x, y) points.

    Args:
        points: (x, y) tuples

    Returns:
        RegressionResult.  Fewer than 2 points or all-equal x give a flat
        line with R² = 0.
    """
    n = len(points)
    if n < 2:
        intercept = float(points[0][1]) if n == 1 else 0.0
        return RegressionResult(slope=0.0, intercept=intercept, r_squared=0.0)

    sum_x = sum(p[0] for p in points)
    sum_y = sum(p[1] for p in points)
    sum_xy = sum(p[0] * p[1] for p in points)
    sum_x2 = sum(p[0] ** 2 for p in points)

    # Avoid division by zero
    denominator = n * sum_x2 - sum_x**2
    if abs(denominator) < 1e-10:
        return RegressionResult(slope=0.0, intercept=sum_y / n, r_squared=0.0)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    ss_res = sum((p[1] - (slope * p[0] + intercept)) ** 2 for p in points)
    ss_tot = sum((p[1] - mean_y) ** 2 for p in points)
    r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 0.0

    return RegressionResult(slope=slope, intercept=intercept, r_squared=r_squared)


def stddev(values: Sequence[float]) -> float:
    """
    Population standard deviation.

    Returns 0.0 for fewer than 2 values.
    """
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)

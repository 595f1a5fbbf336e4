"""
Statistics over historical price series.

Population statistics (denominator N) are used throughout so results match
the values oracle operators compute from the same history.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple


def mean_and_std(values: Sequence[float]) -> Tuple[float, float]:
    """
    Population mean and standard deviation.

    Raises:
        ValueError: If values is empty
    """
    if not values:
        raise ValueError("mean_and_std requires at least one value")
    values = [float(v) for v in values]
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def z_score(value: float, mean: float, std: float) -> float:
    """
    Signed z-score of value against (mean, std).

    With zero dispersion the score is 0.0 when value equals the mean and
    infinite (signed by the direction of the deviation) otherwise.
    """
    if std == 0:
        if value == mean:
            return 0.0
        return math.copysign(math.inf, value - mean)
    return (value - mean) / std


def percent_change(current: float, previous: float) -> float:
    """
    Absolute percent change from previous to current.

    Raises:
        ZeroDivisionError: If previous is zero
    """
    return abs(current - previous) / abs(previous) * 100

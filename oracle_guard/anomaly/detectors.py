"""
Detectors for statistical deviations.

Implements explainable methods:
- Z-score detection against the history baseline
- Sudden-change detection against the most recent accepted value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .schema import BaselineStats
from .statistics import mean_and_std, percent_change, z_score


@dataclass
class ZScoreDetector:
    """
    Z-score detector.

    A history with no dispersion (std within rounding noise of zero) has no
    spread to measure against, so detection is suppressed; the sudden-change
    rule still covers any jump away from a flat history.
    """

    threshold: float
    std_floor_ratio: float = 1e-12

    def baseline(self, series: Sequence[float]) -> Optional[BaselineStats]:
        if not series:
            return None
        mean, std = mean_and_std(series)
        return BaselineStats(mean=mean, std=std, count=len(series))

    def compute(self, observed: float, baseline: BaselineStats) -> Optional[float]:
        if baseline.std <= abs(baseline.mean) * self.std_floor_ratio:
            return None
        return z_score(observed, baseline.mean, baseline.std)

    def is_outlier(self, zscore: Optional[float]) -> bool:
        return zscore is not None and abs(zscore) > self.threshold


@dataclass
class SuddenChangeDetector:
    """
    Percent-change detector.

    Computes |observed - previous| / |previous| * 100. A zero or missing
    previous value has no defined percent change and yields None.
    """

    def compute(self, observed: Optional[float], previous: Optional[float]) -> Optional[float]:
        if observed is None or previous is None or previous == 0:
            return None
        return percent_change(observed, previous)

    def exceeds(self, change: Optional[float], threshold: float) -> bool:
        return change is not None and change > threshold

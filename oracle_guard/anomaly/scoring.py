"""
Severity grading for anomalies.

Severity depends only on how far a metric exceeds its threshold.
"""

from __future__ import annotations

from .schema import AnomalySeverity

HIGH_RATIO = 2.0
MEDIUM_RATIO = 1.5

_ORDER = [AnomalySeverity.LOW, AnomalySeverity.MEDIUM, AnomalySeverity.HIGH]


def grade_severity(metric_value: float, threshold: float) -> AnomalySeverity:
    """
    Map metric_value / threshold to a severity.

    ratio >= 2 is HIGH, ratio >= 1.5 is MEDIUM, anything else LOW.
    """
    ratio = abs(metric_value) / threshold
    if ratio >= HIGH_RATIO:
        return AnomalySeverity.HIGH
    if ratio >= MEDIUM_RATIO:
        return AnomalySeverity.MEDIUM
    return AnomalySeverity.LOW


def overall_severity(*severities: AnomalySeverity) -> AnomalySeverity:
    """
    Return the highest severity among inputs.
    """
    if not severities:
        raise ValueError("overall_severity requires at least one severity")
    highest_index = max(_ORDER.index(s) for s in severities)
    return _ORDER[highest_index]

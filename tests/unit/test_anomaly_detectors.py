"""
Unit tests for anomaly detectors and severity grading.
"""

import pytest

from oracle_guard.anomaly.detectors import SuddenChangeDetector, ZScoreDetector
from oracle_guard.anomaly.schema import AnomalySeverity, BaselineStats
from oracle_guard.anomaly.scoring import grade_severity, overall_severity


def test_zscore_detector_computes_value():
    detector = ZScoreDetector(threshold=3.0)
    baseline = BaselineStats(mean=10.0, std=2.0, count=10)

    z = detector.compute(14.0, baseline)
    assert z is not None
    assert abs(z - 2.0) < 1e-6
    assert not detector.is_outlier(z)
    assert detector.is_outlier(detector.compute(17.0, baseline))


def test_zscore_detector_suppresses_flat_history():
    detector = ZScoreDetector(threshold=3.0)
    baseline = detector.baseline([0.1, 0.1, 0.1])

    assert baseline.count == 3
    assert detector.compute(5.0, baseline) is None
    assert not detector.is_outlier(None)


def test_zscore_detector_empty_series_has_no_baseline():
    assert ZScoreDetector(threshold=3.0).baseline([]) is None


def test_sudden_change_detector():
    detector = SuddenChangeDetector()

    change = detector.compute(observed=50000.0, previous=40000.0)
    assert change == 25.0
    assert detector.exceeds(change, 20.0)
    assert not detector.exceeds(change, 25.0)

    assert detector.compute(observed=10.0, previous=None) is None
    assert detector.compute(observed=10.0, previous=0.0) is None
    assert detector.compute(observed=None, previous=10.0) is None


@pytest.mark.parametrize(
    "metric, threshold, expected",
    [
        (25.0, 20.0, AnomalySeverity.LOW),
        (29.9, 20.0, AnomalySeverity.LOW),
        (30.0, 20.0, AnomalySeverity.MEDIUM),
        (39.9, 20.0, AnomalySeverity.MEDIUM),
        (40.0, 20.0, AnomalySeverity.HIGH),
        (9.0, 3.0, AnomalySeverity.HIGH),
    ],
)
def test_grade_severity(metric, threshold, expected):
    assert grade_severity(metric, threshold) == expected


def test_overall_severity():
    assert overall_severity(AnomalySeverity.LOW, AnomalySeverity.HIGH, AnomalySeverity.MEDIUM) == AnomalySeverity.HIGH
    assert overall_severity(AnomalySeverity.LOW) == AnomalySeverity.LOW

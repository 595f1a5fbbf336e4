"""
Anomaly module: statistical anomaly detection for oracle submissions.

Implements history statistics, detectors, severity grading, the detection
engine and tabular export of anomaly reports.
"""

from .detectors import SuddenChangeDetector, ZScoreDetector
from .engine import AnomalyDetector
from .export import anomalies_to_frame
from .schema import Anomaly, AnomalyKind, AnomalyReport, AnomalySeverity, BaselineStats
from .scoring import grade_severity, overall_severity
from .statistics import mean_and_std, percent_change, z_score

__all__ = [
    "AnomalyDetector",
    "Anomaly",
    "AnomalyKind",
    "AnomalyReport",
    "AnomalySeverity",
    "BaselineStats",
    "ZScoreDetector",
    "SuddenChangeDetector",
    "grade_severity",
    "overall_severity",
    "mean_and_std",
    "percent_change",
    "z_score",
    "anomalies_to_frame",
]

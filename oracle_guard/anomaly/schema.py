"""
Schema definitions for submission anomaly detection.

All anomaly outputs are deterministic and explainable. Each anomaly references
its observed value, the reference it was compared against, the computed
deviation and the threshold that deviation exceeded.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class AnomalySeverity(str, Enum):
    """Severity levels for anomalies."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AnomalyKind(str, Enum):
    """Rules that can flag a submission."""

    SUDDEN_PRICE_CHANGE = "SUDDEN_PRICE_CHANGE"
    STATISTICAL_OUTLIER = "STATISTICAL_OUTLIER"
    INCONSISTENT_DATA = "INCONSISTENT_DATA"
    SUDDEN_MARKET_CAP_CHANGE = "SUDDEN_MARKET_CAP_CHANGE"


class Anomaly(BaseModel):
    """
    A single flagged deviation.

    Fields:
    - kind: rule that fired
    - subject: asset symbol or metric name
    - current_value: value in the submission
    - reference_value: previous price, history mean, previous market cap,
      or the 100% dominance ceiling
    - metric_value: percent change, |z-score| or combined dominance
    - threshold: limit metric_value exceeded
    - severity: graded from metric_value / threshold
    - std_dev: history dispersion (statistical outliers only)
    - message: human-readable summary
    """

    kind: AnomalyKind
    subject: str
    current_value: float
    reference_value: float
    metric_value: float
    threshold: float
    severity: AnomalySeverity
    std_dev: Optional[float] = None
    message: str = ""


class AnomalyReport(BaseModel):
    """
    Outcome of anomaly detection for one submission.

    Fields:
    - submission_id: id of the analysed submission
    - has_anomalies: True iff anomalies is non-empty
    - anomalies: flagged deviations in rule order
    - generated_at: epoch milliseconds
    - insufficient_data: True if history was too short to judge
    - note: explanation for empty results (insufficient data, unsupported
      type, parse failure)
    - error: parse or detection failure detail
    """

    submission_id: int
    has_anomalies: bool = False
    anomalies: List[Anomaly] = Field(default_factory=list)
    generated_at: int
    insufficient_data: bool = False
    note: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _flag_matches_anomalies(self) -> "AnomalyReport":
        if self.has_anomalies != bool(self.anomalies):
            raise ValueError("has_anomalies must be True exactly when anomalies is non-empty")
        return self


class BaselineStats(BaseModel):
    """
    Baseline statistics for one asset's price history.

    Fields:
    - mean: central tendency
    - std: population standard deviation
    - count: number of points used
    """

    mean: float
    std: float
    count: int

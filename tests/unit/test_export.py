"""
Unit tests for tabular anomaly export.
"""

from oracle_guard.anomaly.export import COLUMNS, anomalies_to_frame
from oracle_guard.anomaly.schema import Anomaly, AnomalyKind, AnomalyReport, AnomalySeverity


def _report(submission_id, *anomalies):
    return AnomalyReport(
        submission_id=submission_id,
        has_anomalies=bool(anomalies),
        anomalies=list(anomalies),
        generated_at=1_760_000_000_000,
    )


def _anomaly(subject, severity):
    return Anomaly(
        kind=AnomalyKind.SUDDEN_PRICE_CHANGE,
        subject=subject,
        current_value=50000.0,
        reference_value=40000.0,
        metric_value=25.0,
        threshold=20.0,
        severity=severity,
    )


def test_one_row_per_anomaly():
    reports = [
        _report(1, _anomaly("BTC", AnomalySeverity.LOW), _anomaly("ETH", AnomalySeverity.HIGH)),
        _report(2),
        _report(3, _anomaly("SOL", AnomalySeverity.MEDIUM)),
    ]

    df = anomalies_to_frame(reports)

    assert list(df.columns) == COLUMNS
    assert len(df) == 3
    assert df["submission_id"].tolist() == [1, 1, 3]
    assert df["severity"].tolist() == ["LOW", "HIGH", "MEDIUM"]
    assert df["kind"].unique().tolist() == ["SUDDEN_PRICE_CHANGE"]
    assert str(df["generated_at"].dt.tz) == "UTC"


def test_empty_log():
    df = anomalies_to_frame([])

    assert df.empty
    assert list(df.columns) == COLUMNS

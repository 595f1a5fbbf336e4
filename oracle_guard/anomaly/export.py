"""
Tabular export of anomaly reports for inspection.

Flattens reports into one row per anomaly so operators can filter, group and
sort the anomaly log with pandas.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .schema import AnomalyReport

COLUMNS = [
    "submission_id",
    "generated_at",
    "kind",
    "subject",
    "current_value",
    "reference_value",
    "metric_value",
    "threshold",
    "severity",
    "std_dev",
    "message",
]


def anomalies_to_frame(reports: Iterable[AnomalyReport]) -> pd.DataFrame:
    """
    One row per anomaly across all reports.

    generated_at is converted to a UTC datetime column. Reports without
    anomalies contribute no rows.
    """
    rows = []
    for report in reports:
        for anomaly in report.anomalies:
            row = anomaly.model_dump(mode="json")
            row["submission_id"] = report.submission_id
            row["generated_at"] = report.generated_at
            rows.append(row)

    df = pd.DataFrame(rows, columns=COLUMNS)
    df["generated_at"] = pd.to_datetime(df["generated_at"], unit="ms", utc=True)
    return df

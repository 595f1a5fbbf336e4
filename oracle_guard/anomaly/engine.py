"""
Anomaly detection engine for oracle submissions.

Normalizes a submission, filters history down to the comparable window,
applies the per-type rules and returns an AnomalyReport. Reports that
contain anomalies are appended to the engine's anomaly store.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from oracle_guard.core.config import AnomalyConfig, build_model, config
from oracle_guard.core.exceptions import ParseError
from oracle_guard.core.store import InMemoryRecordStore, RecordStore
from oracle_guard.data.history import HistoryItem, current_time_ms, filter_history
from oracle_guard.data.normalizers import SubmissionItem, coerce_submission, normalize_submission
from oracle_guard.data.schema import (
    AssetPricesPayload,
    HistoricalRecord,
    MarketMetricsPayload,
    Payload,
    Submission,
    UnknownPayload,
)

from .detectors import SuddenChangeDetector, ZScoreDetector
from .schema import Anomaly, AnomalyKind, AnomalyReport, AnomalySeverity
from .scoring import grade_severity, overall_severity

logger = logging.getLogger(__name__)

DOMINANCE_CEILING = 100.0


class AnomalyDetector:
    """
    Deterministic anomaly detector.

    Notes:
    - Detection only starts once min_data_points comparable records exist.
    - Per-asset thresholds gate the sudden-change rule only.
    - Never raises for bad submission data: failures come back as reports
      with error set. A mapping that is not a submission at all (no id)
      raises ParseError, since there is nothing to report against.
    """

    def __init__(
        self,
        settings: Optional[AnomalyConfig] = None,
        store: Optional[RecordStore[AnomalyReport]] = None,
        clock: Callable[[], int] = current_time_ms,
        **overrides: Any,
    ) -> None:
        if overrides:
            base = (settings or config.anomaly).model_dump()
            base.update(overrides)
            settings = build_model(AnomalyConfig, base)
        self.settings = settings or config.anomaly
        self.store: RecordStore[AnomalyReport] = store if store is not None else InMemoryRecordStore()
        self.clock = clock
        self._z_detector = ZScoreDetector(threshold=self.settings.std_dev_threshold)
        self._change_detector = SuddenChangeDetector()

    def detect(
        self, submission: SubmissionItem, history: Iterable[HistoryItem] = ()
    ) -> AnomalyReport:
        submission = coerce_submission(submission)
        logger.info(f"Detecting anomalies for submission {submission.id}")
        now_ms = self.clock()

        try:
            report = self._detect(submission, history, now_ms)
        except ParseError as e:
            logger.warning(f"Submission {submission.id} could not be parsed: {e}")
            return self._error_report(submission, now_ms, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error detecting anomalies for submission {submission.id}")
            return self._error_report(submission, now_ms, f"{type(e).__name__}: {e}")

        if report.has_anomalies:
            for anomaly in report.anomalies:
                logger.warning(f"Submission {submission.id}: {anomaly.message}")
            worst = overall_severity(*(a.severity for a in report.anomalies))
            logger.info(
                f"Submission {submission.id}: {len(report.anomalies)} anomalies, "
                f"highest severity {worst.value}"
            )
            self.store.append(report)

        return report

    def _detect(
        self, submission: Submission, history: Iterable[HistoryItem], now_ms: int
    ) -> AnomalyReport:
        payload = normalize_submission(submission)
        relevant = self.relevant_history(payload, history, now_ms)

        if len(relevant) < self.settings.min_data_points:
            note = (
                f"Insufficient historical data "
                f"({len(relevant)}/{self.settings.min_data_points} points required)"
            )
            logger.info(f"Submission {submission.id}: {note}")
            return AnomalyReport(
                submission_id=submission.id,
                generated_at=now_ms,
                insufficient_data=True,
                note=note,
            )

        note = None
        if isinstance(payload, AssetPricesPayload):
            anomalies = self._detect_asset_price_anomalies(payload, relevant)
        elif isinstance(payload, MarketMetricsPayload):
            anomalies = self._detect_market_metric_anomalies(payload, relevant)
        elif isinstance(payload, UnknownPayload):
            anomalies = []
            note = f"Anomaly detection not supported for data type '{payload.type}'"
        else:
            raise TypeError(f"Unhandled payload variant: {type(payload).__name__}")

        return AnomalyReport(
            submission_id=submission.id,
            has_anomalies=bool(anomalies),
            anomalies=anomalies,
            generated_at=now_ms,
            note=note,
        )

    def relevant_history(
        self, payload: Payload, history: Iterable[HistoryItem], now_ms: Optional[int] = None
    ) -> List[HistoricalRecord]:
        """History filtered to the configured age window."""
        return filter_history(
            payload,
            history,
            max_age_ms=self.settings.max_data_age_ms,
            now_ms=self.clock() if now_ms is None else now_ms,
        )

    def _detect_asset_price_anomalies(
        self, payload: AssetPricesPayload, history: List[HistoricalRecord]
    ) -> List[Anomaly]:
        anomalies: List[Anomaly] = []
        most_recent: AssetPricesPayload = history[0].data

        for asset, quote in payload.predictions.items():
            # First-seen assets cannot be anomalous
            if asset not in most_recent.predictions or quote.price is None:
                continue

            current_price = quote.price
            previous_price = most_recent.price_of(asset)
            threshold = self.settings.threshold_for(asset)
            change = self._change_detector.compute(current_price, previous_price)

            if self._change_detector.exceeds(change, threshold):
                anomalies.append(
                    Anomaly(
                        kind=AnomalyKind.SUDDEN_PRICE_CHANGE,
                        subject=asset,
                        current_value=current_price,
                        reference_value=previous_price,
                        metric_value=change,
                        threshold=threshold,
                        severity=grade_severity(change, threshold),
                        message=(
                            f"{asset} price changed by {change:.2f}% "
                            f"({previous_price} -> {current_price}), threshold {threshold}%"
                        ),
                    )
                )

            if len(history) >= self.settings.outlier_min_points:
                outlier = self._detect_outlier(asset, current_price, history)
                if outlier is not None:
                    anomalies.append(outlier)

        return anomalies

    def _detect_outlier(
        self, asset: str, current_price: float, history: List[HistoricalRecord]
    ) -> Optional[Anomaly]:
        series = [
            price
            for price in (record.data.price_of(asset) for record in history)
            if price is not None
        ]
        baseline = self._z_detector.baseline(series)
        if baseline is None:
            return None

        zscore = self._z_detector.compute(current_price, baseline)
        if not self._z_detector.is_outlier(zscore):
            return None

        threshold = self._z_detector.threshold
        magnitude = abs(zscore)
        return Anomaly(
            kind=AnomalyKind.STATISTICAL_OUTLIER,
            subject=asset,
            current_value=current_price,
            reference_value=baseline.mean,
            metric_value=magnitude,
            threshold=threshold,
            severity=grade_severity(magnitude, threshold),
            std_dev=baseline.std,
            message=(
                f"{asset} price {current_price} is {magnitude:.2f} standard deviations "
                f"from the mean {baseline.mean:.2f} of {baseline.count} points"
            ),
        )

    def _detect_market_metric_anomalies(
        self, payload: MarketMetricsPayload, history: List[HistoricalRecord]
    ) -> List[Anomaly]:
        anomalies: List[Anomaly] = []
        metrics = payload.metrics
        if metrics is None:
            return anomalies

        if metrics.btc_dominance is not None and metrics.eth_dominance is not None:
            total_dominance = metrics.btc_dominance + metrics.eth_dominance
            if total_dominance > DOMINANCE_CEILING:
                anomalies.append(
                    Anomaly(
                        kind=AnomalyKind.INCONSISTENT_DATA,
                        subject="marketDominance",
                        current_value=total_dominance,
                        reference_value=DOMINANCE_CEILING,
                        metric_value=total_dominance,
                        threshold=DOMINANCE_CEILING,
                        severity=AnomalySeverity.HIGH,
                        message=f"Total dominance exceeds 100%: {total_dominance:.2f}%",
                    )
                )

        previous_metrics = history[0].data.metrics
        previous_cap = previous_metrics.total_market_cap if previous_metrics else None
        current_cap = metrics.total_market_cap
        threshold = self.settings.sudden_change_threshold
        change = self._change_detector.compute(current_cap, previous_cap)

        if self._change_detector.exceeds(change, threshold):
            anomalies.append(
                Anomaly(
                    kind=AnomalyKind.SUDDEN_MARKET_CAP_CHANGE,
                    subject="totalMarketCap",
                    current_value=current_cap,
                    reference_value=previous_cap,
                    metric_value=change,
                    threshold=threshold,
                    severity=grade_severity(change, threshold),
                    message=(
                        f"Total market cap changed by {change:.2f}% "
                        f"({previous_cap} -> {current_cap}), threshold {threshold}%"
                    ),
                )
            )

        return anomalies

    def _error_report(self, submission: Submission, now_ms: int, error: str) -> AnomalyReport:
        return AnomalyReport(
            submission_id=submission.id,
            generated_at=now_ms,
            note=f"Anomaly detection failed: {error}",
            error=error,
        )

    def get_detected_anomalies(self) -> List[AnomalyReport]:
        return self.store.snapshot()

    def clear_anomalies(self) -> None:
        self.store.clear()

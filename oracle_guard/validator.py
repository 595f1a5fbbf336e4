"""
Oracle submission validator.

Single entry point for callers: owns one anomaly detector and one decision
agent built from the same configuration, and exposes their logs.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel

from oracle_guard.anomaly import AnomalyDetector, AnomalyReport, anomalies_to_frame
from oracle_guard.core.config import OracleGuardConfig, config
from oracle_guard.core.logging_config import setup_logging
from oracle_guard.core.store import RecordStore
from oracle_guard.data.history import HistoryItem, current_time_ms
from oracle_guard.data.normalizers import SubmissionItem
from oracle_guard.reasoning import Decision, DecisionAgent, DecisionResult

logger = logging.getLogger(__name__)


class ValidationOutcome(BaseModel):
    """Decision and anomaly report for one submission."""

    decision: Decision
    report: AnomalyReport


class OracleValidator:
    """
    Facade over the anomaly detector and the decision agent.

    Both engines share the configuration and clock. Stores may be injected to
    keep decisions and anomaly reports somewhere other than process memory.
    """

    def __init__(
        self,
        settings: Optional[OracleGuardConfig] = None,
        decision_store: Optional[RecordStore[Decision]] = None,
        anomaly_store: Optional[RecordStore[AnomalyReport]] = None,
        clock: Callable[[], int] = current_time_ms,
    ) -> None:
        self.settings = settings or config
        setup_logging("oracle_guard", self.settings)
        self.detector = AnomalyDetector(self.settings.anomaly, store=anomaly_store, clock=clock)
        self.agent = DecisionAgent(self.settings.decision, store=decision_store, clock=clock)

    def detect_anomalies(
        self, submission: SubmissionItem, historical_data: Iterable[HistoryItem] = ()
    ) -> AnomalyReport:
        return self.detector.detect(submission, historical_data)

    def analyze_submission(
        self, submission: SubmissionItem, historical_data: Iterable[HistoryItem] = ()
    ) -> Decision:
        return self.agent.analyze(submission, historical_data)

    def validate(
        self, submission: SubmissionItem, historical_data: Iterable[HistoryItem] = ()
    ) -> ValidationOutcome:
        """Run both the detector and the agent over the same history."""
        history = list(historical_data)
        report = self.detect_anomalies(submission, history)
        decision = self.analyze_submission(submission, history)
        return ValidationOutcome(decision=decision, report=report)

    def should_requeue(self, decision: Decision, attempt: int) -> bool:
        """
        Whether the caller should re-queue an UNCERTAIN submission.

        attempt counts previous re-queues of the same submission, starting at 0.
        """
        return (
            decision.result is DecisionResult.UNCERTAIN
            and attempt < self.settings.decision.max_retries
        )

    def get_decisions(self) -> List[Decision]:
        return self.agent.get_decisions()

    def get_detected_anomalies(self) -> List[AnomalyReport]:
        return self.detector.get_detected_anomalies()

    def anomaly_frame(self):
        """Anomaly log as a pandas DataFrame, one row per anomaly."""
        return anomalies_to_frame(self.get_detected_anomalies())

    def clear_decisions(self) -> None:
        self.agent.clear_decisions()

    def clear_anomalies(self) -> None:
        self.detector.clear_anomalies()

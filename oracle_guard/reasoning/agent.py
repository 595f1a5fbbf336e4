"""
Decision agent: turns reasoning findings into a verdict.

Per call the agent moves linearly through
RECEIVED -> NORMALIZING -> REASONING -> SCORING -> verdict, with no internal
retries. Every finished decision, ERROR included, is appended to the
decision store.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence

from oracle_guard.core.config import DecisionConfig, build_model, config
from oracle_guard.core.exceptions import ParseError
from oracle_guard.core.store import InMemoryRecordStore, RecordStore
from oracle_guard.data.history import HistoryItem, current_time_ms, filter_history
from oracle_guard.data.normalizers import SubmissionItem, coerce_submission, normalize_submission
from oracle_guard.data.schema import Submission

from .checks import check_anomalies, check_consistency, check_structure
from .schema import CheckName, Decision, DecisionResult, FindingKind, ReasoningStep

logger = logging.getLogger(__name__)


def score_confidence(steps: Sequence[ReasoningStep]) -> float:
    """
    Fraction of scored findings that are not negative.

    NEUTRAL findings take no position and are ignored. With nothing scored
    there is nothing to vouch for, so confidence is 0.
    """
    scored = [s for s in steps if s.kind.is_scored]
    if not scored:
        return 0.0
    negative = sum(1 for s in scored if s.kind.is_negative)
    return max(0.0, 1.0 - negative / len(scored))


class DecisionAgent:
    """
    Rule-based reasoning engine.

    Notes:
    - Checks run in a fixed order; reasoning_steps limits how many run.
    - UNCERTAIN findings (unknown data types) count as negative.
    - NEUTRAL findings are left out of the confidence denominator, so an
      unknown-type submission, whose only scored finding is the UNCERTAIN
      structure step, scores 0.0 and is INVALID rather than UNCERTAIN.
    - Parse failures and unexpected faults become ERROR decisions with
      confidence 0 instead of raising. A mapping that is not a submission at
      all (no id) raises ParseError.
    """

    def __init__(
        self,
        settings: Optional[DecisionConfig] = None,
        store: Optional[RecordStore[Decision]] = None,
        clock: Callable[[], int] = current_time_ms,
        **overrides: Any,
    ) -> None:
        if overrides:
            base = (settings or config.decision).model_dump()
            base.update(overrides)
            settings = build_model(DecisionConfig, base)
        self.settings = settings or config.decision
        self.store: RecordStore[Decision] = store if store is not None else InMemoryRecordStore()
        self.clock = clock

    def analyze(self, submission: SubmissionItem, history: Iterable[HistoryItem] = ()) -> Decision:
        submission = coerce_submission(submission)
        logger.info(f"Analyzing submission {submission.id}")
        now_ms = self.clock()
        logger.debug(f"Submission {submission.id}: RECEIVED")

        try:
            decision = self._decide(submission, history, now_ms)
        except ParseError as e:
            logger.warning(f"Submission {submission.id} could not be parsed: {e}")
            decision = self._error_decision(submission, now_ms, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error analyzing submission {submission.id}")
            decision = self._error_decision(submission, now_ms, f"{type(e).__name__}: {e}")

        logger.info(
            f"Submission {submission.id}: {decision.result.value} "
            f"(confidence {decision.confidence:.2f})"
        )
        self.store.append(decision)
        return decision

    def _decide(
        self, submission: Submission, history: Iterable[HistoryItem], now_ms: int
    ) -> Decision:
        logger.debug(f"Submission {submission.id}: NORMALIZING")
        payload = normalize_submission(submission)

        logger.debug(f"Submission {submission.id}: REASONING")
        checks: List[Callable[[], ReasoningStep]] = [
            lambda: check_structure(payload),
            lambda: check_anomalies(
                payload,
                filter_history(payload, history, self.settings.max_data_age_ms, now_ms),
                self.settings.cross_check_threshold,
            ),
            lambda: check_consistency(payload),
        ]
        steps = [check() for check in checks[: self.settings.reasoning_steps]]

        logger.debug(f"Submission {submission.id}: SCORING")
        confidence = score_confidence(steps)

        return Decision(
            submission_id=submission.id,
            result=self.verdict(confidence),
            confidence=confidence,
            reasoning=[s.message for s in steps],
            steps=steps,
            decided_at=now_ms,
        )

    def verdict(self, confidence: float) -> DecisionResult:
        if confidence >= self.settings.confidence_threshold:
            return DecisionResult.VALID
        if confidence <= self.settings.invalid_threshold:
            return DecisionResult.INVALID
        return DecisionResult.UNCERTAIN

    def _error_decision(self, submission: Submission, now_ms: int, error: str) -> Decision:
        message = f"Error occurred during analysis: {error}"
        return Decision(
            submission_id=submission.id,
            result=DecisionResult.ERROR,
            confidence=0.0,
            reasoning=[message],
            steps=[ReasoningStep(check=CheckName.PIPELINE, kind=FindingKind.NEGATIVE, message=message)],
            error_detail=error,
            decided_at=now_ms,
        )

    def get_decisions(self) -> List[Decision]:
        return self.store.snapshot()

    def clear_decisions(self) -> None:
        self.store.clear()

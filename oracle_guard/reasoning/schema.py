"""
Schema definitions for the reasoning engine.

Every check yields a ReasoningStep whose kind decides how it counts toward
confidence. The message is for humans only and is never inspected.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FindingKind(str, Enum):
    """
    How a finding counts toward confidence.

    UNCERTAIN counts as negative. NEUTRAL findings (no comparison possible,
    nothing to check) take no position and are left out of scoring.
    """

    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"
    UNCERTAIN = "UNCERTAIN"

    @property
    def is_negative(self) -> bool:
        return self in (FindingKind.NEGATIVE, FindingKind.UNCERTAIN)

    @property
    def is_scored(self) -> bool:
        return self is not FindingKind.NEUTRAL


class CheckName(str, Enum):
    STRUCTURE = "STRUCTURE"
    ANOMALY = "ANOMALY"
    CONSISTENCY = "CONSISTENCY"
    PIPELINE = "PIPELINE"


class DecisionResult(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"
    UNCERTAIN = "UNCERTAIN"
    ERROR = "ERROR"


class ReasoningStep(BaseModel):
    """One finding produced by a check."""

    check: CheckName
    kind: FindingKind
    message: str


class Decision(BaseModel):
    """
    Verdict for one submission.

    Fields:
    - submission_id: id of the analysed submission
    - result: VALID, INVALID, UNCERTAIN or ERROR
    - confidence: fraction of scored findings that were not negative
    - reasoning: step messages in check order
    - steps: the classified findings behind reasoning
    - error_detail: failure detail for ERROR results
    - decided_at: epoch milliseconds
    """

    submission_id: int
    result: DecisionResult
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: List[str] = Field(default_factory=list)
    steps: List[ReasoningStep] = Field(default_factory=list)
    error_detail: Optional[str] = None
    decided_at: int

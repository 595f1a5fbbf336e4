"""
Reasoning module: ordered checks, confidence scoring and verdicts.
"""

from .agent import DecisionAgent, score_confidence
from .checks import check_anomalies, check_consistency, check_structure
from .schema import CheckName, Decision, DecisionResult, FindingKind, ReasoningStep

__all__ = [
    "DecisionAgent",
    "score_confidence",
    "check_structure",
    "check_anomalies",
    "check_consistency",
    "CheckName",
    "Decision",
    "DecisionResult",
    "FindingKind",
    "ReasoningStep",
]

"""
Oracle Guard: anomaly detection and verdicts for oracle data submissions.
"""

from oracle_guard.validator import OracleValidator, ValidationOutcome

__version__ = "0.1.0"

__all__ = ["OracleValidator", "ValidationOutcome", "__version__"]

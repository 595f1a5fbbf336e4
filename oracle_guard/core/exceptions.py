"""
Custom exceptions for the oracle submission validator.

These exceptions provide clear error semantics across the system.
Use them to distinguish between malformed submissions, detector faults and
configuration errors. Insufficient history and unknown data types are
outcomes, not exceptions.
"""


class OracleGuardError(Exception):
    """Base exception for all validator failures."""
    pass


class ParseError(OracleGuardError):
    """Raised when a submission's data value cannot be decoded or is null."""
    pass


class AnomalyDetectionError(OracleGuardError):
    """Raised when anomaly detection fails for reasons other than parsing."""
    pass


class ConfigurationError(OracleGuardError):
    """Raised when configuration is invalid or missing."""
    pass

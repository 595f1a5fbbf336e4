"""
Core module: Configuration, logging, record stores and exception handling.
"""

from .config import AnomalyConfig, DecisionConfig, OracleGuardConfig, build_config, config
from .exceptions import (
    AnomalyDetectionError,
    ConfigurationError,
    OracleGuardError,
    ParseError,
)
from .store import InMemoryRecordStore, RecordStore

__all__ = [
    "AnomalyConfig",
    "DecisionConfig",
    "OracleGuardConfig",
    "build_config",
    "config",
    "OracleGuardError",
    "ParseError",
    "AnomalyDetectionError",
    "ConfigurationError",
    "RecordStore",
    "InMemoryRecordStore",
]

"""
Data module: submission schema, payload normalization and history filtering.

Pipeline:

    Submission.data_value (JSON string or structure)
        ↓
    Normalization (oracle_guard/data/normalizers.py) → Payload
        ↓
    History filtering (oracle_guard/data/history.py) → comparable window
        ↓
    Ready for anomaly detection and reasoning
"""

from oracle_guard.data.history import current_time_ms, filter_history
from oracle_guard.data.normalizers import coerce_submission, decode_raw, normalize_payload, normalize_submission
from oracle_guard.data.schema import (
    ASSET_PRICES,
    MARKET_METRICS,
    AssetPricesPayload,
    AssetQuote,
    HistoricalRecord,
    MarketMetrics,
    MarketMetricsPayload,
    Payload,
    Submission,
    UnknownPayload,
)

__all__ = [
    # Schema
    "ASSET_PRICES",
    "MARKET_METRICS",
    "Submission",
    "HistoricalRecord",
    "AssetQuote",
    "MarketMetrics",
    "AssetPricesPayload",
    "MarketMetricsPayload",
    "UnknownPayload",
    "Payload",

    # Normalization
    "decode_raw",
    "normalize_payload",
    "normalize_submission",
    "coerce_submission",

    # History
    "filter_history",
    "current_time_ms",
]

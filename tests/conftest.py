"""
Pytest configuration and shared fixtures.

Provides a fixed clock, submission factories and history builders for unit
and integration tests.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from oracle_guard.core.config import AnomalyConfig, DecisionConfig
from oracle_guard.data.schema import HistoricalRecord, Submission

NOW_MS = 1_760_000_000_000
MINUTE_MS = 60 * 1000
DAY_MS = 24 * 60 * MINUTE_MS


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def clock() -> Callable[[], int]:
    """Clock frozen at NOW_MS so history age filtering is deterministic."""
    return lambda: NOW_MS


@pytest.fixture
def anomaly_settings() -> AnomalyConfig:
    """
    Fixture providing detector configuration with explicit defaults.

    Ensures tests run consistently regardless of .env settings.
    """
    return AnomalyConfig()


@pytest.fixture
def decision_settings() -> DecisionConfig:
    return DecisionConfig()


def asset_prices(prices: Dict[str, float], timestamp: Optional[int] = NOW_MS) -> Dict[str, Any]:
    """Raw ASSET_PRICES payload as the ingestion side produces it."""
    payload: Dict[str, Any] = {
        "type": "ASSET_PRICES",
        "predictions": {
            asset: {"price": price, "change": 0.0, "currency": "USD"}
            for asset, price in prices.items()
        },
    }
    if timestamp is not None:
        payload["timestamp"] = timestamp
    return payload


def market_metrics(
    total_market_cap: float = 2.0e12,
    btc_dominance: float = 50.0,
    eth_dominance: float = 18.0,
    timestamp: Optional[int] = NOW_MS,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "type": "MARKET_METRICS",
        "metrics": {
            "totalMarketCap": total_market_cap,
            "btcDominance": btc_dominance,
            "ethDominance": eth_dominance,
        },
    }
    if timestamp is not None:
        payload["timestamp"] = timestamp
    return payload


def make_submission(data_value: Any, submission_id: int = 1, encode: bool = False) -> Submission:
    """Build a submission, optionally JSON-encoding the data value like the on-chain form."""
    data_type = data_value.get("type", "UNKNOWN") if isinstance(data_value, dict) else "UNKNOWN"
    return Submission(
        id=submission_id,
        data_type=data_type,
        data_value=json.dumps(data_value) if encode else data_value,
        confidence=80,
        timestamp=NOW_MS,
        submitter="0x00000000000000000000000000000000000000aa",
    )


def make_history(payloads: List[Dict[str, Any]], spacing_ms: int = MINUTE_MS) -> List[HistoricalRecord]:
    """
    History records for payloads given newest-first.

    The first payload is spacing_ms old, the next 2 * spacing_ms, and so on.
    """
    return [
        HistoricalRecord(data=payload, timestamp=NOW_MS - (i + 1) * spacing_ms)
        for i, payload in enumerate(payloads)
    ]


@pytest.fixture
def flat_btc_history() -> List[HistoricalRecord]:
    """Five BTC records at 40000, all within the age window."""
    return make_history([asset_prices({"BTC": 40000.0}) for _ in range(5)])


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )

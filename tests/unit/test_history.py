"""
Unit tests for history filtering.
"""

import pytest

from conftest import DAY_MS, MINUTE_MS, NOW_MS, asset_prices, market_metrics
from oracle_guard.core.exceptions import ParseError
from oracle_guard.data.history import filter_history
from oracle_guard.data.normalizers import normalize_payload
from oracle_guard.data.schema import AssetPricesPayload, HistoricalRecord

WEEK_MS = 7 * DAY_MS


def _current():
    return normalize_payload(asset_prices({"BTC": 50000.0}))


def test_keeps_only_same_type():
    history = [
        HistoricalRecord(data=asset_prices({"BTC": 1.0}), timestamp=NOW_MS - MINUTE_MS),
        HistoricalRecord(data=market_metrics(), timestamp=NOW_MS - MINUTE_MS),
        HistoricalRecord(data={"type": "WEATHER"}, timestamp=NOW_MS - MINUTE_MS),
    ]

    result = filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

    assert len(result) == 1
    assert isinstance(result[0].data, AssetPricesPayload)


def test_drops_expired_records():
    history = [
        HistoricalRecord(data=asset_prices({"BTC": 1.0}), timestamp=NOW_MS - WEEK_MS),
        HistoricalRecord(data=asset_prices({"BTC": 2.0}), timestamp=NOW_MS - WEEK_MS - 1),
    ]

    result = filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

    assert [r.data.price_of("BTC") for r in result] == [1.0]


def test_falls_back_to_payload_timestamp():
    history = [
        HistoricalRecord(data=asset_prices({"BTC": 1.0}, timestamp=NOW_MS - 5 * MINUTE_MS)),
        HistoricalRecord(data=asset_prices({"BTC": 2.0}, timestamp=None)),
    ]

    result = filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

    assert len(result) == 1
    assert result[0].timestamp == NOW_MS - 5 * MINUTE_MS


def test_sorts_newest_first():
    history = [
        HistoricalRecord(data=asset_prices({"BTC": 1.0}), timestamp=NOW_MS - 3 * MINUTE_MS),
        HistoricalRecord(data=asset_prices({"BTC": 3.0}), timestamp=NOW_MS - 1 * MINUTE_MS),
        HistoricalRecord(data=asset_prices({"BTC": 2.0}), timestamp=NOW_MS - 2 * MINUTE_MS),
    ]

    result = filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

    assert [r.data.price_of("BTC") for r in result] == [3.0, 2.0, 1.0]


def test_accepts_plain_dicts_and_encoded_data():
    history = [
        {"data": '{"type": "ASSET_PRICES", "predictions": {"BTC": {"price": 9}}}', "timestamp": NOW_MS - 1},
        {"data": None, "timestamp": NOW_MS - 1},
    ]

    result = filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

    assert len(result) == 1
    assert result[0].data.price_of("BTC") == 9.0


def test_empty_result_is_not_an_error():
    assert filter_history(_current(), [], WEEK_MS, now_ms=NOW_MS) == []


def test_undecodable_record_raises():
    history = [HistoricalRecord(data="{broken", timestamp=NOW_MS)]

    with pytest.raises(ParseError):
        filter_history(_current(), history, WEEK_MS, now_ms=NOW_MS)

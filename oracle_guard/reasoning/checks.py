"""
Reasoning checks run by the decision agent.

Each check inspects a normalized payload and returns one classified
ReasoningStep. Checks are ordered: structure, anomaly cross-check, internal
consistency.
"""

from __future__ import annotations

from typing import List

from oracle_guard.anomaly.detectors import SuddenChangeDetector
from oracle_guard.data.schema import (
    AssetPricesPayload,
    HistoricalRecord,
    MarketMetricsPayload,
    Payload,
    UnknownPayload,
)

from .schema import CheckName, FindingKind, ReasoningStep

_change_detector = SuddenChangeDetector()


def _step(check: CheckName, kind: FindingKind, message: str) -> ReasoningStep:
    return ReasoningStep(check=check, kind=kind, message=message)


def check_structure(payload: Payload) -> ReasoningStep:
    """Required fields are present and typed fields are well-formed."""
    structure = CheckName.STRUCTURE

    if payload.type is None:
        return _step(structure, FindingKind.NEGATIVE, "Invalid: Missing data type")

    if not payload.timestamp:
        return _step(structure, FindingKind.NEGATIVE, "Invalid: Missing timestamp")

    if isinstance(payload, AssetPricesPayload):
        if not payload.predictions:
            return _step(
                structure, FindingKind.NEGATIVE, "Invalid: Asset price data missing predictions"
            )
        malformed = sorted(
            asset
            for asset, quote in payload.predictions.items()
            if quote.price is None or quote.price <= 0
        )
        if malformed:
            return _step(
                structure,
                FindingKind.NEGATIVE,
                f"Invalid: Missing or non-positive price for assets: {', '.join(malformed)}",
            )
        return _step(
            structure,
            FindingKind.POSITIVE,
            "Valid: Data structure contains all required fields for asset prices",
        )

    if isinstance(payload, MarketMetricsPayload):
        if payload.metrics is None:
            return _step(
                structure, FindingKind.NEGATIVE, "Invalid: Market metrics data missing metrics object"
            )
        return _step(
            structure,
            FindingKind.POSITIVE,
            "Valid: Data structure contains all required fields for market metrics",
        )

    if isinstance(payload, UnknownPayload):
        return _step(structure, FindingKind.UNCERTAIN, f"Uncertain: Unknown data type '{payload.type}'")

    raise TypeError(f"Unhandled payload variant: {type(payload).__name__}")


def check_anomalies(
    payload: Payload, history: List[HistoricalRecord], threshold: float
) -> ReasoningStep:
    """
    Compare against the most recent comparable record.

    history must be history-filter output (same type, newest first).
    """
    anomaly = CheckName.ANOMALY

    if not history:
        return _step(
            anomaly,
            FindingKind.NEUTRAL,
            "No comparable historical data available; anomaly comparison not possible",
        )

    most_recent = history[0].data

    if isinstance(payload, AssetPricesPayload):
        jumps = []
        for asset, quote in payload.predictions.items():
            change = _change_detector.compute(quote.price, most_recent.price_of(asset))
            if _change_detector.exceeds(change, threshold):
                jumps.append(f"{asset} price changed by {change:.2f}%")
        if jumps:
            return _step(
                anomaly, FindingKind.NEGATIVE, f"Potential anomalies detected: {', '.join(jumps)}"
            )
        return _step(anomaly, FindingKind.POSITIVE, "No significant anomalies detected in asset prices")

    if isinstance(payload, MarketMetricsPayload):
        current = payload.metrics.total_market_cap if payload.metrics else None
        previous = most_recent.metrics.total_market_cap if most_recent.metrics else None
        change = _change_detector.compute(current, previous)
        if change is None:
            return _step(anomaly, FindingKind.NEUTRAL, "No comparable market cap values found")
        if _change_detector.exceeds(change, threshold):
            return _step(
                anomaly,
                FindingKind.NEGATIVE,
                f"Potential anomalies detected: total market cap changed by {change:.2f}%",
            )
        return _step(anomaly, FindingKind.POSITIVE, "No significant anomalies detected in market metrics")

    if isinstance(payload, UnknownPayload):
        return _step(anomaly, FindingKind.NEUTRAL, "Anomaly comparison not supported for this data type")

    raise TypeError(f"Unhandled payload variant: {type(payload).__name__}")


def check_consistency(payload: Payload) -> ReasoningStep:
    """Field-level sanity of the values themselves."""
    consistency = CheckName.CONSISTENCY

    if isinstance(payload, AssetPricesPayload):
        priced = {a: q.price for a, q in payload.predictions.items() if q.price is not None}
        if not priced:
            return _step(consistency, FindingKind.NEUTRAL, "No asset prices to check for consistency")
        non_positive = sorted(asset for asset, price in priced.items() if price <= 0)
        if non_positive:
            return _step(
                consistency,
                FindingKind.NEGATIVE,
                f"Inconsistent: Negative or zero prices for assets: {', '.join(non_positive)}",
            )
        return _step(consistency, FindingKind.POSITIVE, "Valid: All asset prices are positive and consistent")

    if isinstance(payload, MarketMetricsPayload):
        metrics = payload.metrics
        if metrics is None:
            return _step(consistency, FindingKind.NEUTRAL, "No market metrics to check for consistency")

        problems = []
        btc, eth = metrics.btc_dominance, metrics.eth_dominance
        if btc is not None and eth is not None and btc + eth > 100:
            problems.append(f"BTC and ETH dominance combined exceeds 100% ({btc + eth:.2f}%)")
        for name, value in (("BTC dominance", btc), ("ETH dominance", eth)):
            if value is not None and not 0 <= value <= 100:
                problems.append(f"{name} outside 0-100% ({value})")
        if metrics.total_market_cap is not None and metrics.total_market_cap <= 0:
            problems.append(f"total market cap is not positive ({metrics.total_market_cap})")

        if problems:
            return _step(consistency, FindingKind.NEGATIVE, f"Inconsistent: {'; '.join(problems)}")
        return _step(consistency, FindingKind.POSITIVE, "Valid: Market metrics are internally consistent")

    if isinstance(payload, UnknownPayload):
        return _step(consistency, FindingKind.NEUTRAL, "Consistency check not supported for this data type")

    raise TypeError(f"Unhandled payload variant: {type(payload).__name__}")

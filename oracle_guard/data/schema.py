"""
Canonical schema for oracle submissions and their payloads.

A submission arrives from the ingestion side with a raw data value that is
either already decoded or a JSON string. The normalizer turns that value into
one of a closed set of payload variants defined here. All downstream stages
(history filtering, anomaly detection, reasoning) only ever see these types.

Design rationale:
- Wire names are camelCase, field names are snake_case; both are accepted
- Timestamps are integer epoch milliseconds, as produced by the oracle
- Payloads are frozen so a stage cannot alter what a later stage sees
- Presence of fields is not enforced here; missing values are findings for
  the reasoning engine, not parse failures
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ASSET_PRICES = "ASSET_PRICES"
MARKET_METRICS = "MARKET_METRICS"


class Submission(BaseModel):
    """
    A single data point awaiting validation.

    Attributes:
        id: Oracle-assigned submission identifier
        data_type: Declared type of the payload (e.g. "ASSET_PRICES")
        data_value: Decoded structure or JSON-encoded string
        confidence: Submitter's self-reported confidence
        timestamp: Submission time in epoch milliseconds
        submitter: Identifier of the submitting account
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    data_type: str = Field(..., alias="dataType")
    data_value: Any = Field(None, alias="dataValue")
    confidence: float = 0.0
    timestamp: int = 0
    submitter: Optional[str] = None


class HistoricalRecord(BaseModel):
    """
    A previously accepted payload with its record-level timestamp.

    After history filtering, data holds the normalized payload and timestamp
    the effective timestamp used for ordering.
    """

    model_config = ConfigDict(frozen=True)

    data: Any = None
    timestamp: Optional[int] = None


class AssetQuote(BaseModel):
    """Price prediction for one asset symbol."""

    model_config = ConfigDict(frozen=True, extra="allow", allow_inf_nan=False)

    price: Optional[float] = None
    change: Optional[float] = None
    currency: str = "USD"


class MarketMetrics(BaseModel):
    """Aggregate market metrics. Unrecognized metrics are kept as extras."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True, allow_inf_nan=False)

    total_market_cap: Optional[float] = Field(None, alias="totalMarketCap")
    btc_dominance: Optional[float] = Field(None, alias="btcDominance")
    eth_dominance: Optional[float] = Field(None, alias="ethDominance")


class AssetPricesPayload(BaseModel):
    """Per-asset price predictions."""

    model_config = ConfigDict(frozen=True)

    type: Literal["ASSET_PRICES"] = ASSET_PRICES
    timestamp: Optional[int] = None
    predictions: Dict[str, AssetQuote] = Field(default_factory=dict)

    def price_of(self, asset: str) -> Optional[float]:
        quote = self.predictions.get(asset)
        return quote.price if quote is not None else None


class MarketMetricsPayload(BaseModel):
    """Market-wide metrics snapshot."""

    model_config = ConfigDict(frozen=True)

    type: Literal["MARKET_METRICS"] = MARKET_METRICS
    timestamp: Optional[int] = None
    metrics: Optional[MarketMetrics] = None


class UnknownPayload(BaseModel):
    """
    Payload of a type the validator has no rules for.

    type is None when the raw value declared no type at all. The remaining
    fields are carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None
    timestamp: Optional[int] = None
    fields: Dict[str, Any] = Field(default_factory=dict)


Payload = Union[AssetPricesPayload, MarketMetricsPayload, UnknownPayload]
PAYLOAD_CLASSES = (AssetPricesPayload, MarketMetricsPayload, UnknownPayload)

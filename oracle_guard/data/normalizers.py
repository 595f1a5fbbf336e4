"""
Payload normalization: decode raw data values into typed payload variants.

Converts a submission's data value (or a historical record's data) into one
of AssetPricesPayload, MarketMetricsPayload or UnknownPayload.

Design:
- Strings and bytes are JSON-decoded; already-decoded mappings are used as-is
- Already-normalized payloads pass through unchanged
- Dispatch on the "type" field; unrecognized types become UnknownPayload
- Decode failures raise ParseError, never a silent default
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from oracle_guard.core.exceptions import ParseError
from oracle_guard.data.schema import (
    ASSET_PRICES,
    MARKET_METRICS,
    PAYLOAD_CLASSES,
    AssetPricesPayload,
    MarketMetricsPayload,
    Payload,
    Submission,
    UnknownPayload,
)

logger = logging.getLogger(__name__)

SubmissionItem = Union[Submission, Mapping[str, Any]]

_TYPED_PAYLOADS = {
    ASSET_PRICES: AssetPricesPayload,
    MARKET_METRICS: MarketMetricsPayload,
}


def decode_raw(raw: Any) -> Dict[str, Any]:
    """
    Decode a raw data value into a mapping.

    Args:
        raw: Mapping, JSON string or JSON bytes

    Returns:
        Decoded mapping

    Raises:
        ParseError: If the value is null, not valid JSON, or not an object
    """
    if raw is None:
        raise ParseError("Data value is null")

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Data value is not valid UTF-8: {e}") from e

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(f"Data value is not valid JSON: {e.msg} at position {e.pos}") from e
        if raw is None:
            raise ParseError("Data value is null")

    if not isinstance(raw, dict):
        raise ParseError(f"Expected an object, got {type(raw).__name__}")

    return raw


def normalize_payload(raw: Any) -> Payload:
    """
    Convert a raw data value to its typed payload.

    Args:
        raw: Payload instance, mapping, or JSON-encoded string

    Returns:
        AssetPricesPayload, MarketMetricsPayload, or UnknownPayload

    Raises:
        ParseError: If decoding fails or a typed field has an impossible shape
            (e.g. predictions that are not a mapping, a non-numeric or
            non-finite price)
    """
    if isinstance(raw, PAYLOAD_CLASSES):
        return raw

    data = decode_raw(raw)
    declared_type = data.get("type")

    payload_cls = _TYPED_PAYLOADS.get(declared_type)
    if payload_cls is None:
        return _unknown_payload(data, declared_type)

    # Explicit nulls mean "missing"; drop them so defaults apply
    cleaned = {k: v for k, v in data.items() if v is not None}
    try:
        return payload_cls.model_validate(cleaned)
    except ValidationError as e:
        raise ParseError(f"Malformed {declared_type} payload: {_describe(e)}") from e


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def _unknown_payload(data: Dict[str, Any], declared_type: Any) -> UnknownPayload:
    timestamp = data.get("timestamp")
    if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
        timestamp = None

    type_name = str(declared_type) if declared_type not in (None, "") else None
    if type_name is not None:
        logger.debug(f"No payload rules for data type '{type_name}', carrying through")

    return UnknownPayload(
        type=type_name,
        timestamp=int(timestamp) if timestamp is not None else None,
        fields={k: v for k, v in data.items() if k not in ("type", "timestamp")},
    )


def normalize_submission(submission: Submission) -> Payload:
    """Normalize a submission's data value."""
    return normalize_payload(submission.data_value)


def coerce_submission(item: SubmissionItem) -> Submission:
    """
    Accept a Submission or its mapping form (camelCase or snake_case keys).

    Raises:
        ParseError: If the mapping is not a submission (e.g. no id)
    """
    if isinstance(item, Submission):
        return item
    try:
        return Submission.model_validate(item)
    except ValidationError as e:
        raise ParseError(f"Malformed submission: {_describe(e)}") from e

"""
History filtering: select the comparable window of past submissions.

Given the payload under review, keeps only historical records of the same
type that are younger than the maximum age, newest first. The anomaly
detector and the reasoning engine only ever look at this filtered window.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, List, Mapping, Optional, Union

from oracle_guard.data.normalizers import normalize_payload
from oracle_guard.data.schema import HistoricalRecord, Payload

logger = logging.getLogger(__name__)

HistoryItem = Union[HistoricalRecord, Mapping[str, Any]]


def current_time_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def coerce_record(item: HistoryItem) -> HistoricalRecord:
    if isinstance(item, HistoricalRecord):
        return item
    return HistoricalRecord.model_validate(item)


def filter_history(
    payload: Payload,
    history: Iterable[HistoryItem],
    max_age_ms: int,
    now_ms: Optional[int] = None,
) -> List[HistoricalRecord]:
    """
    Select same-type, non-expired records sorted newest-first.

    Steps (order matters):
        1. Keep records whose normalized type equals payload.type
        2. Keep records whose timestamp (record-level, falling back to the
           payload timestamp) is within now - max_age_ms
        3. Sort descending by that timestamp

    Args:
        payload: Normalized payload under review
        history: Historical records or plain dicts with "data"/"timestamp"
        max_age_ms: Maximum record age in milliseconds
        now_ms: Reference time (defaults to wall clock)

    Returns:
        Records carrying the normalized payload and effective timestamp.
        Empty if nothing matches.

    Raises:
        ParseError: If a record's data cannot be decoded
    """
    now_ms = current_time_ms() if now_ms is None else now_ms

    same_type: List[HistoricalRecord] = []
    for item in history:
        record = coerce_record(item)
        if record.data is None:
            continue
        record_payload = normalize_payload(record.data)
        if record_payload.type != payload.type:
            continue
        same_type.append(record.model_copy(update={"data": record_payload}))

    recent: List[HistoricalRecord] = []
    for record in same_type:
        timestamp = record.timestamp if record.timestamp else record.data.timestamp
        if not timestamp:
            continue
        if now_ms - timestamp > max_age_ms:
            continue
        recent.append(record.model_copy(update={"timestamp": timestamp}))

    recent.sort(key=lambda r: r.timestamp, reverse=True)

    logger.debug(
        f"History filter kept {len(recent)} of {len(same_type)} '{payload.type}' records"
    )
    return recent

"""
Append-only record stores for completed decisions and anomaly reports.

Engines write every finished result to a store so callers can inspect or
clear them later. The store is the only mutable state an engine owns, so
appends, snapshots and clears are serialized behind one lock.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

T = TypeVar("T")


class RecordStore(ABC, Generic[T]):
    """
    Abstract append-only store.

    Implementations must make append and clear atomic with respect to each
    other when engines are shared between threads.
    """

    @abstractmethod
    def append(self, record: T) -> None:
        pass

    @abstractmethod
    def snapshot(self) -> List[T]:
        """Return a copy of all records in insertion order."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self.snapshot())


class InMemoryRecordStore(RecordStore[T]):
    """Process-local store guarded by a lock."""

    def __init__(self) -> None:
        self._records: List[T] = []
        self._lock = threading.Lock()

    def append(self, record: T) -> None:
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> List[T]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

"""
Unit tests for append-only record stores.
"""

import threading

from oracle_guard.core.store import InMemoryRecordStore


def test_append_snapshot_clear():
    store = InMemoryRecordStore()
    store.append("a")
    store.append("b")

    snapshot = store.snapshot()
    snapshot.append("c")

    assert store.snapshot() == ["a", "b"]
    assert len(store) == 2

    store.clear()

    assert store.snapshot() == []
    assert len(store) == 0


def test_concurrent_appends_are_not_lost():
    store = InMemoryRecordStore()

    def writer(offset):
        for i in range(500):
            store.append(offset + i)

    threads = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 8 * 500
    assert len(set(store.snapshot())) == 8 * 500

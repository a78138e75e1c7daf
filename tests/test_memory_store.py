from __future__ import annotations

import threading

import pytest

from datastore_connector.errors import EntityNotFoundError, TransactionConflictError
from datastore_connector.interfaces import StoreKey
from datastore_connector.memory_store import MemoryTransactionalStore

KEY = StoreKey("counters", "k1")


def test_transaction_commits_on_normal_exit(memory_store):
    with memory_store.transaction() as txn:
        assert txn.get(KEY) is None
        txn.put(KEY, {"Amount": 1})
        assert txn.get(KEY) == {"Amount": 1}

    assert memory_store.get(KEY) == {"Amount": 1}


def test_transaction_rolls_back_on_error(memory_store):
    with pytest.raises(RuntimeError):
        with memory_store.transaction() as txn:
            txn.put(KEY, {"Amount": 1})
            raise RuntimeError("boom")

    with pytest.raises(EntityNotFoundError):
        memory_store.get(KEY)


def test_uncommitted_writes_are_invisible(memory_store):
    with memory_store.transaction() as txn:
        txn.put(KEY, {"Amount": 2})
        assert memory_store.count(KEY) == 0
    assert memory_store.count(KEY) == 1


def test_documents_are_copied(memory_store):
    doc = {"tags": ["a"]}
    memory_store.put(KEY, doc)
    doc["tags"].append("b")

    loaded = memory_store.get(KEY)
    loaded["tags"].append("c")
    assert memory_store.get(KEY) == {"tags": ["a"]}


def test_lock_timeout_is_a_conflict():
    store = MemoryTransactionalStore(lock_timeout=0.05)
    holding = threading.Event()
    release = threading.Event()

    def _holder() -> None:
        with store.transaction() as txn:
            txn.get(KEY)
            holding.set()
            release.wait(5)

    t = threading.Thread(target=_holder)
    t.start()
    try:
        assert holding.wait(5)
        with pytest.raises(TransactionConflictError):
            with store.transaction() as txn:
                txn.get(KEY)
    finally:
        release.set()
        t.join()

    # Lock is released after the first transaction ends.
    with store.transaction() as txn:
        txn.put(KEY, {"Amount": 1})
    assert store.get(KEY) == {"Amount": 1}


def test_delete_missing_key_is_silent(memory_store):
    memory_store.delete(KEY)
    assert memory_store.count(KEY) == 0

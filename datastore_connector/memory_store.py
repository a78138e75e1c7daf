from __future__ import annotations

import contextlib
import copy
import logging
import threading
from typing import Any, Iterator

from .errors import EntityNotFoundError, TransactionConflictError
from .interfaces import StoreKey, TransactionalStore
from .locks import KeyLockRegistry

logger = logging.getLogger(__name__)


class _MemoryTransaction:
    def __init__(self, store: MemoryTransactionalStore):
        self._store = store
        self._held: dict[StoreKey, threading.Lock] = {}
        self._writes: dict[StoreKey, dict[str, Any]] = {}

    def _acquire(self, key: StoreKey) -> None:
        if key in self._held:
            return
        lock = self._store._locks.lock_for(key)
        if not lock.acquire(timeout=self._store.lock_timeout):
            raise TransactionConflictError(f"timed out waiting for lock on {key}")
        self._held[key] = lock

    def get(self, key: StoreKey) -> dict[str, Any] | None:
        self._acquire(key)
        if key in self._writes:
            return copy.deepcopy(self._writes[key])
        return self._store._read(key)

    def put(self, key: StoreKey, doc: dict[str, Any]) -> None:
        self._acquire(key)
        self._writes[key] = copy.deepcopy(dict(doc))

    def commit(self) -> None:
        with self._store._guard:
            self._store._docs.update(self._writes)
        logger.debug("MEMORY TXN: committed %d write(s)", len(self._writes))
        self._writes.clear()

    def rollback(self) -> None:
        self._writes.clear()

    def release(self) -> None:
        for lock in self._held.values():
            lock.release()
        self._held.clear()


class MemoryTransactionalStore(TransactionalStore):
    """
    In-process store with pessimistic per-key locking.

    A transaction takes the lock of every key it touches on first access and
    holds it until commit/rollback, so read-modify-write sequences on the same
    key are serialized. A transaction that cannot get a lock within
    `lock_timeout` seconds fails with TransactionConflictError.
    """

    def __init__(self, lock_timeout: float = 10.0) -> None:
        self.lock_timeout = lock_timeout
        self._guard = threading.Lock()
        self._locks = KeyLockRegistry()
        self._docs: dict[StoreKey, dict[str, Any]] = {}

    def _read(self, key: StoreKey) -> dict[str, Any] | None:
        with self._guard:
            doc = self._docs.get(key)
            return copy.deepcopy(doc) if doc is not None else None

    @contextlib.contextmanager
    def transaction(self) -> Iterator[_MemoryTransaction]:
        txn = _MemoryTransaction(self)
        try:
            yield txn
        except Exception:
            txn.rollback()
            raise
        else:
            txn.commit()
        finally:
            txn.release()

    @contextlib.contextmanager
    def _locked(self, key: StoreKey) -> Iterator[None]:
        lock = self._locks.lock_for(key)
        if not lock.acquire(timeout=self.lock_timeout):
            raise TransactionConflictError(f"timed out waiting for lock on {key}")
        try:
            yield
        finally:
            lock.release()

    def put(self, key: StoreKey, doc: dict[str, Any]) -> StoreKey:
        with self._locked(key):
            with self._guard:
                self._docs[key] = copy.deepcopy(dict(doc))
        return key

    def get(self, key: StoreKey) -> dict[str, Any]:
        doc = self._read(key)
        if doc is None:
            raise EntityNotFoundError(key)
        return doc

    def delete(self, key: StoreKey) -> None:
        with self._locked(key):
            with self._guard:
                self._docs.pop(key, None)

    def count(self, key: StoreKey) -> int:
        with self._guard:
            return 1 if key in self._docs else 0

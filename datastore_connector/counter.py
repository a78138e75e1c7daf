from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .errors import ClientConstructionError
from .interfaces import StoreKey, TransactionalStore

logger = logging.getLogger(__name__)

# (operation, entity_id, error)
ErrorHook = Callable[[str, str, Exception], None]


class CounterRecord(BaseModel):
    """
    Mirrors the stored counter entity:
      { "Amount": <int >= 0> }
    """

    model_config = ConfigDict(populate_by_name=True)

    amount: int = Field(default=0, ge=0, alias="Amount")

    @classmethod
    def from_store_doc(cls, doc: Mapping[str, Any] | None) -> "CounterRecord":
        # A missing counter reads as zero; a negative stored amount reads as zero too.
        if doc is None:
            return cls()
        data = dict(doc)
        amount = data.get("Amount", data.get("amount"))
        if isinstance(amount, int) and amount < 0:
            data.pop("amount", None)
            data["Amount"] = 0
        return cls.model_validate(data)

    def to_store_doc(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class CounterRepository(Protocol):
    def count(self, entity_id: str) -> int:
        ...

    def increment(self, entity_id: str, delta: int) -> bool:
        ...

    def decrement(self, entity_id: str, delta: int) -> bool:
        ...


class AtomicCounter(CounterRepository):
    """
    Named non-negative counters updated with transactional read-modify-write.

    Every operation runs in its own store transaction: read the counter, compute
    the new amount, write it, commit. Concurrent updates of the same counter are
    serialized by the store, never by this class.

    Failures are not raised. `count` returns 0 and `increment`/`decrement`
    return False; the error is logged and handed to `on_error` if given.
    ClientConstructionError is the exception: it always propagates.
    """

    def __init__(
        self,
        store: TransactionalStore,
        collection: str,
        *,
        on_error: ErrorHook | None = None,
    ) -> None:
        self._store = store
        self._collection = collection
        self._on_error = on_error

    @property
    def collection(self) -> str:
        return self._collection

    def count(self, entity_id: str) -> int:
        try:
            key = StoreKey(self._collection, entity_id)
            with self._store.transaction() as txn:
                record = CounterRecord.from_store_doc(txn.get(key))
        except ClientConstructionError:
            raise
        except Exception as e:
            self._report("count", entity_id, e)
            return 0
        return record.amount

    def increment(self, entity_id: str, delta: int) -> bool:
        return self._apply("increment", entity_id, delta, lambda amount: amount + delta)

    def decrement(self, entity_id: str, delta: int) -> bool:
        # Clamp at zero instead of failing.
        return self._apply("decrement", entity_id, delta, lambda amount: max(0, amount - delta))

    def _apply(self, operation: str, entity_id: str, delta: int, compute: Callable[[int], int]) -> bool:
        try:
            if delta < 0:
                raise ValueError(f"{operation} delta must be >= 0, got {delta}")
            key = StoreKey(self._collection, entity_id)
            with self._store.transaction() as txn:
                current = CounterRecord.from_store_doc(txn.get(key))
                updated = CounterRecord(amount=compute(current.amount))
                txn.put(key, updated.to_store_doc())
        except ClientConstructionError:
            raise
        except Exception as e:
            self._report(operation, entity_id, e)
            return False

        logger.debug("COUNTER %s: %s %d -> %d", operation.upper(), key, current.amount, updated.amount)
        return True

    def _report(self, operation: str, entity_id: str, error: Exception) -> None:
        logger.warning("COUNTER %s failed: entity_id=%r: %r", operation.upper(), entity_id, error)
        if self._on_error is None:
            return
        try:
            self._on_error(operation, entity_id, error)
        except Exception:
            logger.debug("COUNTER: on_error hook raised", exc_info=True)

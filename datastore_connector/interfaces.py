from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import InvalidEntityIdError


@dataclass(frozen=True)
class StoreKey:
    """A named entity within a collection (a Datastore kind)."""

    collection: str
    entity_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.collection, str) or not self.collection:
            raise InvalidEntityIdError(f"invalid collection name: {self.collection!r}")
        if not isinstance(self.entity_id, str) or not self.entity_id:
            raise InvalidEntityIdError(f"invalid entity id: {self.entity_id!r}")

    def __str__(self) -> str:
        return f"{self.collection}/{self.entity_id}"


class StoreTransaction(Protocol):
    """
    Reads and writes bound to one open transaction.

    Writes are buffered and only become visible when the transaction commits.
    """

    def get(self, key: StoreKey) -> dict[str, Any] | None:
        """Return the stored document, or None when the key does not exist."""
        ...

    def put(self, key: StoreKey, doc: dict[str, Any]) -> None:
        ...


class EntityStore(Protocol):
    """
    Non-transactional operations. Each call stands on its own.
    """

    def put(self, key: StoreKey, doc: dict[str, Any]) -> StoreKey:
        ...

    def get(self, key: StoreKey) -> dict[str, Any]:
        """Raise EntityNotFoundError when the key does not exist."""
        ...

    def delete(self, key: StoreKey) -> None:
        ...

    def count(self, key: StoreKey) -> int:
        """Keys-only count of entities matching `key`."""
        ...


class TransactionalStore(EntityStore, Protocol):
    def transaction(self) -> AbstractContextManager[StoreTransaction]:
        """
        Open a transaction. Leaving the block normally commits; an exception
        rolls back and propagates.
        """
        ...

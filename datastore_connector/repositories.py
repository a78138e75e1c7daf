from __future__ import annotations

import asyncio
from typing import Any, Protocol

from .counter import CounterRepository
from .entities import Entity, EntityRepository, ModelT
from .interfaces import StoreKey


class AsyncCounterRepository(Protocol):
    async def count(self, entity_id: str) -> int: ...
    async def increment(self, entity_id: str, delta: int) -> bool: ...
    async def decrement(self, entity_id: str, delta: int) -> bool: ...


class AsyncEntityRepository(Protocol):
    async def save(self, entity_id: str, entity: Entity) -> StoreKey: ...
    async def update(self, entity_id: str, entity: Entity) -> StoreKey: ...
    async def retrieve(self, entity_id: str, model: type[ModelT] | None = None) -> Any: ...
    async def delete(self, entity_id: str) -> bool: ...
    async def exist(self, entity_id: str) -> bool: ...


class AsyncAtomicCounter(AsyncCounterRepository):
    """
    Async wrapper around a counter repository.
    Uses asyncio.to_thread to avoid blocking the event loop on store round-trips.
    """

    def __init__(self, counter: CounterRepository) -> None:
        self._counter = counter

    async def count(self, entity_id: str) -> int:
        return await asyncio.to_thread(self._counter.count, entity_id)

    async def increment(self, entity_id: str, delta: int) -> bool:
        return await asyncio.to_thread(self._counter.increment, entity_id, delta)

    async def decrement(self, entity_id: str, delta: int) -> bool:
        return await asyncio.to_thread(self._counter.decrement, entity_id, delta)


class AsyncEntityService(AsyncEntityRepository):
    def __init__(self, entities: EntityRepository) -> None:
        self._entities = entities

    async def save(self, entity_id: str, entity: Entity) -> StoreKey:
        return await asyncio.to_thread(self._entities.save, entity_id, entity)

    async def update(self, entity_id: str, entity: Entity) -> StoreKey:
        return await asyncio.to_thread(self._entities.update, entity_id, entity)

    async def retrieve(self, entity_id: str, model: type[ModelT] | None = None) -> Any:
        return await asyncio.to_thread(self._entities.retrieve, entity_id, model)

    async def delete(self, entity_id: str) -> bool:
        return await asyncio.to_thread(self._entities.delete, entity_id)

    async def exist(self, entity_id: str) -> bool:
        return await asyncio.to_thread(self._entities.exist, entity_id)

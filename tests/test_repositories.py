from __future__ import annotations

import asyncio

import pytest

from datastore_connector.errors import EntityNotFoundError
from datastore_connector.repositories import AsyncAtomicCounter, AsyncEntityService


def test_async_counter_roundtrip(counter):
    async def _run():
        repo = AsyncAtomicCounter(counter)

        assert await repo.count("likes") == 0
        results = await asyncio.gather(*(repo.increment("likes", 1) for _ in range(20)))
        assert all(results)
        assert await repo.count("likes") == 20

        assert await repo.decrement("likes", 50) is True
        assert await repo.count("likes") == 0

    asyncio.run(_run())


def test_async_entity_service_basic_flow(entities):
    async def _run():
        repo = AsyncEntityService(entities)

        await repo.save("e1", {"name": "alpha"})
        assert await repo.exist("e1") is True
        assert await repo.retrieve("e1") == {"name": "alpha"}

        await repo.update("e1", {"name": "beta"})
        assert (await repo.retrieve("e1"))["name"] == "beta"

        assert await repo.delete("e1") is False
        with pytest.raises(EntityNotFoundError):
            await repo.retrieve("e1")

    asyncio.run(_run())

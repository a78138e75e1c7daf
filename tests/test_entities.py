from __future__ import annotations

import pytest
from pydantic import BaseModel

from datastore_connector.entities import EntityService
from datastore_connector.errors import EntityNotFoundError, InvalidEntityIdError, StoreUnavailableError
from datastore_connector.interfaces import StoreKey
from datastore_connector.memory_store import MemoryTransactionalStore


class ApplicationRecord(BaseModel):
    name: str
    owner: str
    tags: list[str] = []


class _UnavailableStore(MemoryTransactionalStore):
    def put(self, key, doc):
        raise StoreUnavailableError("store offline")

    def delete(self, key):
        raise StoreUnavailableError("store offline")

    def count(self, key):
        raise StoreUnavailableError("store offline")


def test_save_then_retrieve_model(entities):
    record = ApplicationRecord(name="billing", owner="alice", tags=["prod"])

    key = entities.save("app-1", record)
    assert key == StoreKey("applications", "app-1")

    got = entities.retrieve("app-1", ApplicationRecord)
    assert got == record


def test_save_then_retrieve_mapping(entities):
    entities.save("app-2", {"name": "search", "owner": "bob"})
    assert entities.retrieve("app-2") == {"name": "search", "owner": "bob"}


def test_retrieve_missing_raises_not_found(entities):
    with pytest.raises(EntityNotFoundError):
        entities.retrieve("ghost")


def test_update_overwrites(entities):
    entities.save("app-3", {"name": "old", "owner": "carol"})
    entities.update("app-3", ApplicationRecord(name="new", owner="carol"))

    assert entities.retrieve("app-3", ApplicationRecord).name == "new"


def test_exist(entities):
    assert entities.exist("app-4") is False
    entities.save("app-4", {"name": "x", "owner": "y"})
    assert entities.exist("app-4") is True


def test_delete_returns_false_on_success(entities):
    entities.save("app-5", {"name": "x", "owner": "y"})

    assert entities.delete("app-5") is False
    assert entities.exist("app-5") is False


def test_delete_returns_true_on_store_error():
    entities = EntityService(_UnavailableStore(), "applications")
    assert entities.delete("app-6") is True


def test_exist_treats_errors_as_missing():
    entities = EntityService(_UnavailableStore(), "applications")
    assert entities.exist("app-7") is False


def test_save_propagates_store_errors():
    entities = EntityService(_UnavailableStore(), "applications")
    with pytest.raises(StoreUnavailableError):
        entities.save("app-8", {"name": "x"})


def test_empty_entity_id_is_rejected(entities):
    with pytest.raises(InvalidEntityIdError):
        entities.save("", {"name": "x"})
    with pytest.raises(ValueError):
        entities.retrieve("")


def test_whitespace_entity_id_is_a_valid_name(entities):
    entities.save(" ", {"name": "blank"})
    assert entities.retrieve(" ") == {"name": "blank"}
    assert entities.exist(" ") is True


def test_save_rejects_unsupported_entity_type(entities):
    with pytest.raises(TypeError):
        entities.save("app-9", ["not", "a", "record"])

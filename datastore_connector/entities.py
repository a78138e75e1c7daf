from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, TypeVar, Union

from pydantic import BaseModel

from .errors import ClientConstructionError
from .interfaces import EntityStore, StoreKey

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
Entity = Union[BaseModel, Mapping[str, Any]]


def _to_store_doc(entity: Entity) -> dict[str, Any]:
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json")
    if isinstance(entity, Mapping):
        return dict(entity)
    raise TypeError(f"entity must be a pydantic model or a mapping, got {type(entity).__name__}")


class EntityRepository(Protocol):
    def save(self, entity_id: str, entity: Entity) -> StoreKey:
        ...

    def update(self, entity_id: str, entity: Entity) -> StoreKey:
        ...

    def retrieve(self, entity_id: str, model: type[ModelT] | None = None) -> Any:
        ...

    def delete(self, entity_id: str) -> bool:
        ...

    def exist(self, entity_id: str) -> bool:
        ...


class EntityService(EntityRepository):
    """
    Plain, non-transactional CRUD over one collection.

    save/update/retrieve raise store errors (EntityNotFoundError included).
    delete/exist collapse errors into a bool, except ClientConstructionError.
    """

    def __init__(self, store: EntityStore, collection: str) -> None:
        self._store = store
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    def _key(self, entity_id: str) -> StoreKey:
        return StoreKey(self._collection, entity_id)

    def save(self, entity_id: str, entity: Entity) -> StoreKey:
        key = self._store.put(self._key(entity_id), _to_store_doc(entity))
        logger.debug("ENTITY SAVE: %s", key)
        return key

    def update(self, entity_id: str, entity: Entity) -> StoreKey:
        # Same unconditional upsert as save.
        key = self._store.put(self._key(entity_id), _to_store_doc(entity))
        logger.debug("ENTITY UPDATE: %s", key)
        return key

    def retrieve(self, entity_id: str, model: type[ModelT] | None = None) -> Any:
        """
        Load an entity. Returns a dict, or an instance of `model` when given.
        Raises EntityNotFoundError if nothing is stored under `entity_id`.
        """
        doc = self._store.get(self._key(entity_id))
        if model is None:
            return doc
        return model.model_validate(doc)

    def delete(self, entity_id: str) -> bool:
        """
        Delete an entity.

        NOTE: returns True when the delete call FAILED and False when it
        succeeded. Existing callers depend on this polarity.
        """
        try:
            self._store.delete(self._key(entity_id))
        except ClientConstructionError:
            raise
        except Exception as e:
            logger.warning("ENTITY DELETE failed: entity_id=%r: %r", entity_id, e)
            return True
        return False

    def exist(self, entity_id: str) -> bool:
        try:
            return self._store.count(self._key(entity_id)) > 0
        except ClientConstructionError:
            raise
        except Exception as e:
            logger.debug("ENTITY EXIST: treating error as missing: entity_id=%r: %r", entity_id, e)
            return False

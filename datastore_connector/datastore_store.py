from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterator

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import datastore

from .errors import EntityNotFoundError, StoreError, StoreUnavailableError, TransactionConflictError
from .interfaces import StoreKey, TransactionalStore

logger = logging.getLogger(__name__)


def _translate(e: Exception) -> StoreError:
    if isinstance(e, (api_exceptions.Aborted, api_exceptions.Conflict)):
        return TransactionConflictError(str(e))
    if isinstance(e, api_exceptions.ClientError):
        return StoreError(str(e))
    return StoreUnavailableError(str(e))


@contextlib.contextmanager
def _translated() -> Iterator[None]:
    try:
        yield
    except (api_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
        raise _translate(e) from e


def _to_entity(key: datastore.Key, doc: dict[str, Any]) -> datastore.Entity:
    entity = datastore.Entity(key=key)
    entity.update(doc)
    return entity


class _DatastoreTransaction:
    def __init__(self, client: datastore.Client, txn: datastore.Transaction):
        self._client = client
        self._txn = txn

    def get(self, key: StoreKey) -> dict[str, Any] | None:
        entity = self._client.get(self._client.key(key.collection, key.entity_id), transaction=self._txn)
        return dict(entity) if entity is not None else None

    def put(self, key: StoreKey, doc: dict[str, Any]) -> None:
        self._txn.put(_to_entity(self._client.key(key.collection, key.entity_id), doc))


class DatastoreStore(TransactionalStore):
    """
    TransactionalStore backed by Cloud Datastore (or Firestore in Datastore mode).

    `client_source` is called on every operation; pass `ClientProvider.get` so
    the client is built on first use and shared afterwards.
    """

    def __init__(self, client_source: Callable[[], datastore.Client]):
        self._client_source = client_source

    def _key(self, client: datastore.Client, key: StoreKey) -> datastore.Key:
        return client.key(key.collection, key.entity_id)

    @contextlib.contextmanager
    def transaction(self) -> Iterator[_DatastoreTransaction]:
        client = self._client_source()
        with _translated():
            with client.transaction() as txn:
                yield _DatastoreTransaction(client, txn)

    def put(self, key: StoreKey, doc: dict[str, Any]) -> StoreKey:
        client = self._client_source()
        with _translated():
            client.put(_to_entity(self._key(client, key), doc))
        return key

    def get(self, key: StoreKey) -> dict[str, Any]:
        client = self._client_source()
        with _translated():
            entity = client.get(self._key(client, key))
        if entity is None:
            raise EntityNotFoundError(key)
        return dict(entity)

    def delete(self, key: StoreKey) -> None:
        client = self._client_source()
        with _translated():
            client.delete(self._key(client, key))

    def count(self, key: StoreKey) -> int:
        client = self._client_source()
        query = client.query(kind=key.collection)
        query.keys_only()
        query.key_filter(self._key(client, key), "=")
        with _translated():
            aggregation = client.aggregation_query(query).count(alias="total")
            for results in aggregation.fetch():
                for result in results:
                    if result.alias == "total":
                        return int(result.value)
        logger.debug("DATASTORE COUNT: no aggregation result for %s", key)
        return 0

from __future__ import annotations

from dataclasses import dataclass

from .client import ClientProvider
from .counter import AtomicCounter, ErrorHook
from .datastore_store import DatastoreStore
from .entities import EntityService
from .settings import Settings, get_settings


@dataclass(frozen=True)
class Connector:
    """Services of one hosting application, all sharing a single client provider."""

    provider: ClientProvider
    store: DatastoreStore
    counter: AtomicCounter
    entities: EntityService


def create_connector(settings: Settings | None = None, *, on_error: ErrorHook | None = None) -> Connector:
    settings = settings or get_settings()

    provider = ClientProvider(settings.client_config())
    # Build now: a construction failure must reach the host before any service exists.
    provider.get()
    store = DatastoreStore(provider.get)

    return Connector(
        provider=provider,
        store=store,
        counter=AtomicCounter(store, settings.collection, on_error=on_error),
        entities=EntityService(store, settings.collection),
    )

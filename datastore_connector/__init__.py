from __future__ import annotations

from .client import ClientProvider, create_client
from .config import (
    ClientConfig,
    ClientMode,
    EmulatorConfig,
    KeyfileConfig,
    SimpleConfig,
    build_client_config,
    select_client_mode,
)
from .connector import Connector, create_connector
from .counter import AtomicCounter, CounterRecord, CounterRepository
from .datastore_store import DatastoreStore
from .entities import EntityRepository, EntityService
from .errors import (
    ClientConstructionError,
    EntityNotFoundError,
    InvalidEntityIdError,
    StoreError,
    StoreUnavailableError,
    TransactionConflictError,
)
from .interfaces import EntityStore, StoreKey, StoreTransaction, TransactionalStore
from .memory_store import MemoryTransactionalStore
from .repositories import (
    AsyncAtomicCounter,
    AsyncCounterRepository,
    AsyncEntityRepository,
    AsyncEntityService,
)
from .settings import Settings, get_settings

__all__ = [
    "ClientProvider",
    "create_client",
    "ClientConfig",
    "ClientMode",
    "EmulatorConfig",
    "KeyfileConfig",
    "SimpleConfig",
    "build_client_config",
    "select_client_mode",
    "Connector",
    "create_connector",
    "AtomicCounter",
    "CounterRecord",
    "CounterRepository",
    "DatastoreStore",
    "EntityRepository",
    "EntityService",
    "ClientConstructionError",
    "EntityNotFoundError",
    "InvalidEntityIdError",
    "StoreError",
    "StoreUnavailableError",
    "TransactionConflictError",
    "EntityStore",
    "StoreKey",
    "StoreTransaction",
    "TransactionalStore",
    "MemoryTransactionalStore",
    "AsyncAtomicCounter",
    "AsyncCounterRepository",
    "AsyncEntityRepository",
    "AsyncEntityService",
    "Settings",
    "get_settings",
]

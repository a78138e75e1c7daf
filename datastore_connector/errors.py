from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by the connector."""


class ClientConstructionError(StoreError):
    """The store client could not be built. Not recoverable."""


class EntityNotFoundError(StoreError):
    def __init__(self, key: object):
        super().__init__(f"no such entity: {key}")
        self.key = key


class TransactionConflictError(StoreError):
    """A transaction was aborted by a concurrent transaction on the same key."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or rejected the call."""


class InvalidEntityIdError(StoreError, ValueError):
    pass

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Callable

from google.auth.credentials import AnonymousCredentials
from google.cloud import datastore
from google.oauth2 import service_account

from .config import ClientConfig, ClientMode, EmulatorConfig, KeyfileConfig, SimpleConfig
from .errors import ClientConstructionError

logger = logging.getLogger(__name__)

EMULATOR_HOST_ENV = "DATASTORE_EMULATOR_HOST"
DATASTORE_SCOPE = "https://www.googleapis.com/auth/datastore"


def _emulator_client(config: EmulatorConfig) -> datastore.Client:
    # The client reads the emulator endpoint from the environment at construction time.
    os.environ[EMULATOR_HOST_ENV] = config.emulator_address
    return datastore.Client(project=config.project_id, credentials=AnonymousCredentials())


def _keyfile_client(config: KeyfileConfig) -> datastore.Client:
    info = json.loads(config.keyfile.read_text(encoding="utf-8"))
    credentials = service_account.Credentials.from_service_account_info(info, scopes=[DATASTORE_SCOPE])
    project = config.project_id or info.get("project_id")
    return datastore.Client(project=project, credentials=credentials)


def _simple_client(config: SimpleConfig) -> datastore.Client:
    return datastore.Client(project=config.project_id)


def create_client(config: ClientConfig) -> datastore.Client:
    """
    Build a Datastore client for exactly one connection mode.

    Raises ClientConstructionError on any failure. Callers are not expected to
    recover: without a client nothing in this package can run.
    """
    mode = getattr(config, "mode", None)
    logger.info("DATASTORE CLIENT: mode=%s project=%s", mode, getattr(config, "project_id", None))
    try:
        if isinstance(config, EmulatorConfig):
            return _emulator_client(config)
        if isinstance(config, KeyfileConfig):
            return _keyfile_client(config)
        if isinstance(config, SimpleConfig):
            return _simple_client(config)
    except Exception as e:
        logger.critical("DATASTORE CLIENT: construction failed (mode=%s): %r", mode, e)
        raise ClientConstructionError(f"cannot build {mode} datastore client: {e}") from e

    logger.critical("DATASTORE CLIENT: unknown client config %r", config)
    raise ClientConstructionError(f"unknown datastore client config: {config!r}")


class ClientProvider:
    """
    Owns the single store client of a hosting application.

    The client is built on the first `get()`; concurrent first callers block
    until it exists and then share it. A failed build is remembered and
    re-raised on every later call without another attempt. There is no teardown.
    """

    def __init__(
        self,
        config: ClientConfig,
        factory: Callable[[ClientConfig], datastore.Client] = create_client,
    ) -> None:
        self._config = config
        self._factory = factory
        self._lock = threading.Lock()
        self._client: datastore.Client | None = None
        self._error: ClientConstructionError | None = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def mode(self) -> ClientMode:
        return self._config.mode

    def get(self) -> datastore.Client:
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._error is not None:
                raise self._error
            if self._client is None:
                try:
                    self._client = self._factory(self._config)
                except ClientConstructionError as e:
                    self._error = e
                    raise
            return self._client

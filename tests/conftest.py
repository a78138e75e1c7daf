from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def memory_store():
    from datastore_connector.memory_store import MemoryTransactionalStore

    return MemoryTransactionalStore(lock_timeout=5.0)


@pytest.fixture
def counter(memory_store):
    from datastore_connector.counter import AtomicCounter

    return AtomicCounter(memory_store, "counters")


@pytest.fixture
def entities(memory_store):
    from datastore_connector.entities import EntityService

    return EntityService(memory_store, "applications")


@pytest.fixture
def clean_datastore_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Strip connector-related variables so settings/client tests start from defaults.
    """
    for name in (
        "DATASTORE_EMULATOR_ENABLED",
        "DATASTORE_EMULATOR_HOST_ADDR",
        "DATASTORE_EMULATOR_HOST",
        "GCLOUD_CREDENTIALS_PATH",
        "GCLOUD_PROJECT_ID",
        "DATASTORE_COLLECTION",
    ):
        monkeypatch.delenv(name, raising=False)

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .config import ClientConfig, build_client_config


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Emulator
    emulator_enabled: bool
    emulator_address: str

    # Credentials directory holding keyfile.json (empty: ambient credentials)
    credentials_path: str

    # Empty lets the client infer the project from the environment
    project_id: str

    # Kind used for counters / entities
    collection: str

    def client_config(self) -> ClientConfig:
        return build_client_config(
            self.emulator_enabled,
            self.emulator_address,
            self.credentials_path,
            self.project_id,
        )


def get_settings(env_file: str | None = None) -> Settings:
    if env_file:
        load_dotenv(env_file)

    emulator_enabled = _env_bool("DATASTORE_EMULATOR_ENABLED", False)
    emulator_address = os.getenv("DATASTORE_EMULATOR_HOST_ADDR", "localhost:8081").strip()

    credentials_path = os.getenv("GCLOUD_CREDENTIALS_PATH", "").strip()
    project_id = os.getenv("GCLOUD_PROJECT_ID", "").strip()

    collection = os.getenv("DATASTORE_COLLECTION", "counters").strip() or "counters"

    return Settings(
        emulator_enabled=emulator_enabled,
        emulator_address=emulator_address,
        credentials_path=credentials_path,
        project_id=project_id,
        collection=collection,
    )

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from .paths import keyfile_path


class ClientMode(Enum):
    SIMPLE = 1
    EMULATOR = 2
    KEYFILE = 3

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SimpleConfig:
    """Ambient default credentials (metadata server, gcloud login, GOOGLE_APPLICATION_CREDENTIALS)."""

    project_id: str | None = None

    @property
    def mode(self) -> ClientMode:
        return ClientMode.SIMPLE


@dataclass(frozen=True)
class EmulatorConfig:
    emulator_address: str
    project_id: str | None = None

    @property
    def mode(self) -> ClientMode:
        return ClientMode.EMULATOR


@dataclass(frozen=True)
class KeyfileConfig:
    credentials_path: str
    project_id: str | None = None

    @property
    def mode(self) -> ClientMode:
        return ClientMode.KEYFILE

    @property
    def keyfile(self) -> Path:
        return keyfile_path(self.credentials_path)


ClientConfig = Union[SimpleConfig, EmulatorConfig, KeyfileConfig]


def select_client_mode(emulator_enabled: bool, credentials_path: str | None) -> ClientMode:
    if emulator_enabled:
        return ClientMode.EMULATOR
    if credentials_path:
        return ClientMode.KEYFILE
    return ClientMode.SIMPLE


def build_client_config(
    emulator_enabled: bool,
    emulator_address: str,
    credentials_path: str | None,
    project_id: str | None,
) -> ClientConfig:
    """
    Pick exactly one connection variant.

    The emulator flag takes precedence over a credentials path; with neither,
    the client falls back to ambient default credentials.
    """
    project = project_id or None
    mode = select_client_mode(emulator_enabled, credentials_path)
    if mode is ClientMode.EMULATOR:
        return EmulatorConfig(emulator_address=emulator_address, project_id=project)
    if mode is ClientMode.KEYFILE:
        return KeyfileConfig(credentials_path=str(credentials_path), project_id=project)
    return SimpleConfig(project_id=project)

from __future__ import annotations

from pathlib import Path

KEYFILE_NAME = "keyfile.json"


def keyfile_path(credentials_dir: str | Path) -> Path:
    # <credentials_dir>/keyfile.json
    return Path(credentials_dir).expanduser() / KEYFILE_NAME

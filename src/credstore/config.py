# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Union

# IMPORTANT: do not rely on current working directory.
# Anchor the default storage path to the project root (works well with editable installs).
BASE_DIR = Path(__file__).resolve().parents[2]  # .../credstore project

STORAGE_TYPE = os.getenv("CREDSTORE_STORAGE_TYPE", "file").strip().lower()
JSON_FILE_PATH = Path(
    os.getenv("CREDSTORE_JSON_FILE_PATH", str(BASE_DIR / "data" / "storage.json"))
).resolve()

LOG_LEVEL = os.getenv("CREDSTORE_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("CREDSTORE_LOG_FORMAT", "text").strip().lower()  # text | json

HOST = os.getenv("CREDSTORE_HOST", "127.0.0.1")
PORT = int(os.getenv("CREDSTORE_PORT", "8000"))


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


def init_storage_file(path: Union[str, Path]) -> Path:
    """Create an empty storage document if ``path`` does not exist yet."""
    p = Path(path)
    if p.exists():
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps({"users": {}}, indent=2) + "\n", encoding="utf-8")
    return p

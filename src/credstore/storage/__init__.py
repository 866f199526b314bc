# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Storage backends for user credentials and sessions."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from credstore.errors import UnsupportedStorageTypeError
from credstore.storage.abstract import AbstractStorage, StorageType
from credstore.storage.json_file import JSONFileStorage
from credstore.storage.models import SessionLookup, UserRecord

__all__ = [
    "AbstractStorage",
    "JSONFileStorage",
    "SessionLookup",
    "StorageType",
    "UserRecord",
    "create_storage",
]


def create_storage(storage_type: Union[StorageType, str], path: Union[str, Path]) -> AbstractStorage:
    try:
        kind = StorageType(storage_type)
    except ValueError:
        raise UnsupportedStorageTypeError(storage_type) from None

    if kind is StorageType.FILE:
        return JSONFileStorage(path)
    raise UnsupportedStorageTypeError(storage_type)

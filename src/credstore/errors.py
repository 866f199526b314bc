# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations


class CredStoreError(Exception):
    """Base error for credstore."""


class InvalidStorageFormatError(CredStoreError, ValueError):
    """The storage document does not have a ``users`` object."""

    def __init__(self, path: str, message: str = "Invalid storage format"):
        self.path = path
        super().__init__(f"{message}: {path}")


class UserNotFoundError(CredStoreError, KeyError):
    """Raised by operations that need an existing user record."""

    def __init__(self, user: str):
        self.user = user
        super().__init__(user)

    def __str__(self) -> str:
        return f"No record for user: {self.user}"


class UnsupportedStorageTypeError(CredStoreError, ValueError):
    def __init__(self, storage_type: object):
        self.storage_type = storage_type
        super().__init__(f"Unsupported storage type: {storage_type!r}")

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import abc
from enum import Enum
from typing import Optional

from credstore.storage.models import SessionLookup


class StorageType(str, Enum):
    FILE = "file"


class AbstractStorage(abc.ABC):
    """Operations every credential storage backend provides.

    One instance maps to one underlying store (file, db connection...).
    Callers keep a single instance per store for the application's lifetime.
    """

    @abc.abstractmethod
    async def get_user_password_hash(self, user: str) -> Optional[str]:
        """Return the stored hash, or ``None`` if the user or the field is unset."""

    @abc.abstractmethod
    async def upsert_user_password_hash(self, user: str, password_hash: str) -> None:
        """Set the password hash, creating the user record if needed."""

    @abc.abstractmethod
    async def get_user_and_csrf_token_by_session_id(self, session_id: str) -> SessionLookup:
        """Return the user owning ``session_id`` and its CSRF token, or an empty lookup."""

    @abc.abstractmethod
    async def upsert_user_session_id(self, user: str, session_id: str) -> None:
        """Set the active session id, creating the user record if needed."""

    @abc.abstractmethod
    async def upsert_user_csrf_token(self, user: str, csrf_token: str) -> None:
        """Set the CSRF token of an existing user record."""

    @abc.abstractmethod
    async def delete_user_session_id(self, user: str) -> None:
        """Remove the session id of an existing user record."""

    async def upsert_user_hash(self, user: str, password_hash: str) -> bool:
        await self.upsert_user_password_hash(user, password_hash)
        return True

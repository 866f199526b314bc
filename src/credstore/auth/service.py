# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from credstore.auth.passwords import hash_password, needs_rehash, verify_password
from credstore.auth.session import new_csrf_token, new_session_id
from credstore.logs import get_logger
from credstore.storage import AbstractStorage, SessionLookup

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: str
    session_id: str
    csrf_token: str


class AuthService:
    """Password login and single-session handling over any storage backend.

    A user has at most one active session: logging in again replaces the
    stored session id and CSRF token.
    """

    def __init__(self, storage: AbstractStorage):
        self.storage = storage

    async def set_password(self, user: str, plain: str) -> None:
        user = (user or "").strip()
        if not user:
            raise ValueError("Empty username")
        await self.storage.upsert_user_password_hash(user, hash_password(plain))

    async def login(self, user: str, plain: str) -> Optional[LoginResult]:
        user = (user or "").strip()
        if not user:
            return None
        stored = await self.storage.get_user_password_hash(user)
        if not verify_password(stored, plain):
            logger.info(f"Login rejected for user: {user}", extra={"user": user})
            return None
        if needs_rehash(stored):
            await self.storage.upsert_user_password_hash(user, hash_password(plain))

        # Session first: the csrf upsert needs an existing record.
        session_id = new_session_id()
        csrf_token = new_csrf_token()
        await self.storage.upsert_user_session_id(user, session_id)
        await self.storage.upsert_user_csrf_token(user, csrf_token)
        return LoginResult(user=user, session_id=session_id, csrf_token=csrf_token)

    async def resolve_session(self, session_id: Optional[str]) -> SessionLookup:
        if not session_id:
            return SessionLookup()
        return await self.storage.get_user_and_csrf_token_by_session_id(session_id)

    async def logout(self, user: str) -> None:
        await self.storage.delete_user_session_id(user)

    @staticmethod
    def verify_csrf(lookup: SessionLookup, token: Optional[str]) -> bool:
        if not lookup or not lookup.csrf_token or not token:
            return False
        return hmac.compare_digest(lookup.csrf_token, token)

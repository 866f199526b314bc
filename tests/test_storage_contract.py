import asyncio
from typing import Dict, Optional

import pytest

from credstore.errors import UnsupportedStorageTypeError, UserNotFoundError
from credstore.storage import AbstractStorage, JSONFileStorage, SessionLookup, StorageType, create_storage


def test_create_storage_file_backend(storage_path):
    s = create_storage("file", storage_path)
    assert isinstance(s, JSONFileStorage)
    assert isinstance(create_storage(StorageType.FILE, storage_path), AbstractStorage)


def test_create_storage_unknown_type(storage_path):
    with pytest.raises(UnsupportedStorageTypeError):
        create_storage("postgres", storage_path)


def test_abstract_storage_cannot_be_instantiated():
    with pytest.raises(TypeError):
        AbstractStorage()


class DictStorage(AbstractStorage):
    """Minimal in-memory backend, used to check the contract is substitutable."""

    def __init__(self):
        self.users: Dict[str, Dict[str, str]] = {}

    async def get_user_password_hash(self, user: str) -> Optional[str]:
        return self.users.get(user, {}).get("passwordHash")

    async def upsert_user_password_hash(self, user: str, password_hash: str) -> None:
        self.users.setdefault(user, {})["passwordHash"] = password_hash

    async def get_user_and_csrf_token_by_session_id(self, session_id: str) -> SessionLookup:
        for user, rec in self.users.items():
            if rec.get("sessionId") == session_id:
                return SessionLookup(user=user, csrf_token=rec.get("csrfToken"))
        return SessionLookup()

    async def upsert_user_session_id(self, user: str, session_id: str) -> None:
        self.users.setdefault(user, {})["sessionId"] = session_id

    async def upsert_user_csrf_token(self, user: str, csrf_token: str) -> None:
        if user not in self.users:
            raise UserNotFoundError(user)
        self.users[user]["csrfToken"] = csrf_token

    async def delete_user_session_id(self, user: str) -> None:
        if user not in self.users:
            raise UserNotFoundError(user)
        self.users[user].pop("sessionId", None)


def test_upsert_user_hash_is_provided_by_base():
    s = DictStorage()
    assert asyncio.run(s.upsert_user_hash("alice", "h1")) is True
    assert s.users == {"alice": {"passwordHash": "h1"}}

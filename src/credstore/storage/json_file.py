# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from credstore.errors import InvalidStorageFormatError, UserNotFoundError
from credstore.logs import get_logger
from credstore.storage.abstract import AbstractStorage
from credstore.storage.models import FIELD_KEYS, SessionLookup, UserRecord

logger = get_logger(__name__)

Document = Dict[str, Any]
Users = Dict[str, Dict[str, Any]]


def _check_document(raw: Any, path: Path) -> Document:
    if not isinstance(raw, dict) or not isinstance(raw.get("users"), dict):
        raise InvalidStorageFormatError(str(path))
    return raw


def _store_record(users: Users, user: str, record: UserRecord) -> None:
    """Write ``record`` back, keeping keys this module does not manage."""
    existing = users.get(user) or {}
    kept = {k: v for k, v in existing.items() if k not in FIELD_KEYS}
    users[user] = {**kept, **record.to_dict()}


def _parse_record(raw: Any, user: str, path: Path) -> UserRecord:
    try:
        return UserRecord.from_dict(raw)
    except TypeError as e:
        raise InvalidStorageFormatError(str(path), f"Invalid record for user {user!r} ({e})") from e


def _existing_record(users: Users, user: str, path: Path) -> UserRecord:
    if user not in users:
        raise UserNotFoundError(user)
    return _parse_record(users[user], user, path)


def _atomic_write(path: Path, payload: str) -> None:
    fd, name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        # mkstemp creates 0600; carry over the mode of the file being replaced.
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


# One lock per storage file, shared by every instance on that path.
_LOCKS: Dict[Path, Tuple[asyncio.AbstractEventLoop, asyncio.Lock]] = {}


def _path_lock(path: Path) -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    entry = _LOCKS.get(path)
    if entry is None or entry[0] is not loop:
        entry = (loop, asyncio.Lock())
        _LOCKS[path] = entry
    return entry[1]


class JSONFileStorage(AbstractStorage):
    """Storage backed by a single JSON document::

        {"users": {"<username>": {"passwordHash": ..., "sessionId": ..., "csrfToken": ...}}}

    Every operation reads the whole file, changes it in memory and writes it
    back in full through a temp file and ``os.replace``. Read-modify-write
    cycles are serialized with an ``asyncio.Lock`` per resolved path, so several
    instances on one file in one process do not lose updates. Writers in other
    processes are not coordinated.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).resolve()

        # Fail at startup rather than on the first request.
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        _check_document(raw, self.path)
        logger.info(f"File used for json file storage: {self.path}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self.path)!r})"

    # ------------------ Contract ------------------

    async def get_user_password_hash(self, user: str) -> Optional[str]:
        ctx = {"operation": "get_user_password_hash", "user": user}
        try:
            document = await self._read()
            logger.info(f"Getting password hash for user: {user}", extra=ctx)
            if user not in document["users"]:
                return None
            return _parse_record(document["users"][user], user, self.path).password_hash
        except Exception:
            logger.error(f"Failed to get password hash for user: {user}", exc_info=True, extra=ctx)
            raise

    async def upsert_user_password_hash(self, user: str, password_hash: str) -> None:
        ctx = {"operation": "upsert_user_password_hash", "user": user}
        try:
            def _apply(users: Users) -> None:
                record = _parse_record(users.get(user), user, self.path)
                record.password_hash = password_hash
                _store_record(users, user, record)

            await self._modify(_apply)
            logger.info(f"Password hash upserted for user: {user}", extra=ctx)
        except Exception:
            logger.error(f"Failed to upsert password hash for user: {user}", exc_info=True, extra=ctx)
            raise

    async def get_user_and_csrf_token_by_session_id(self, session_id: str) -> SessionLookup:
        ctx = {"operation": "get_user_and_csrf_token_by_session_id"}
        try:
            document = await self._read()
            for user, raw in document["users"].items():
                record = _parse_record(raw, user, self.path)
                if record.session_id is not None and record.session_id == session_id:
                    logger.info(f"Getting user and csrf token by session id: {user}", extra={**ctx, "user": user})
                    return SessionLookup(user=user, csrf_token=record.csrf_token)
            return SessionLookup()
        except Exception:
            logger.error("Failed to get user by session id", exc_info=True, extra=ctx)
            raise

    async def upsert_user_session_id(self, user: str, session_id: str) -> None:
        ctx = {"operation": "upsert_user_session_id", "user": user}
        try:
            def _apply(users: Users) -> None:
                record = _parse_record(users.get(user), user, self.path)
                record.session_id = session_id
                _store_record(users, user, record)

            await self._modify(_apply)
            logger.info(f"Session id upserted for user: {user}", extra=ctx)
        except Exception:
            logger.error(f"Failed to upsert session id for user: {user}", exc_info=True, extra=ctx)
            raise

    async def upsert_user_csrf_token(self, user: str, csrf_token: str) -> None:
        ctx = {"operation": "upsert_user_csrf_token", "user": user}
        try:
            def _apply(users: Users) -> None:
                record = _existing_record(users, user, self.path)
                record.csrf_token = csrf_token
                _store_record(users, user, record)

            await self._modify(_apply)
            logger.info(f"Csrf token upserted for user: {user}", extra=ctx)
        except Exception:
            logger.error(f"Failed to upsert csrf token for user: {user}", exc_info=True, extra=ctx)
            raise

    async def delete_user_session_id(self, user: str) -> None:
        ctx = {"operation": "delete_user_session_id", "user": user}
        try:
            def _apply(users: Users) -> None:
                record = _existing_record(users, user, self.path)
                record.session_id = None
                _store_record(users, user, record)

            await self._modify(_apply)
            logger.info(f"Session id deleted for user: {user}", extra=ctx)
        except Exception:
            logger.error(f"Failed to delete session id for user: {user}", exc_info=True, extra=ctx)
            raise

    # ------------------ File I/O ------------------

    async def _read(self) -> Document:
        text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        return _check_document(json.loads(text), self.path)

    async def _write(self, document: Document) -> None:
        payload = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        await asyncio.to_thread(_atomic_write, self.path, payload)

    async def _modify(self, mutate: Callable[[Users], None]) -> None:
        async with _path_lock(self.path):
            document = await self._read()
            mutate(document["users"])
            await self._write(document)

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# On-disk keys (camelCase) -> attribute names
FIELD_KEYS = {
    "passwordHash": "password_hash",
    "sessionId": "session_id",
    "csrfToken": "csrf_token",
}


@dataclass
class UserRecord:
    """One entry under ``users``. ``None`` means the field is absent."""

    password_hash: Optional[str] = None
    session_id: Optional[str] = None
    csrf_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserRecord":
        """Build a record from its on-disk form. Raises TypeError on a malformed entry."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeError(f"user entry must be an object, got {type(data).__name__}")
        kwargs = {}
        for key, attr in FIELD_KEYS.items():
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{key} must be a string, got {type(value).__name__}")
            kwargs[attr] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for key, attr in FIELD_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class SessionLookup:
    """Result of resolving a session id. Both fields are ``None`` when nothing matched."""

    user: Optional[str] = None
    csrf_token: Optional[str] = None

    def __bool__(self) -> bool:
        return self.user is not None

    def as_dict(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        if self.user is not None:
            out["user"] = self.user
        if self.csrf_token is not None:
            out["csrfToken"] = self.csrf_token
        return out

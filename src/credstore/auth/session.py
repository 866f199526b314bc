# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import secrets
from typing import Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

COOKIE_NAME = os.getenv("CREDSTORE_COOKIE_NAME", "credstore_session")
CSRF_HEADER = "X-CSRF-Token"
DEFAULT_MAX_AGE_SECONDS = int(os.getenv("CREDSTORE_SESSION_MAX_AGE", "28800"))  # 8 hours


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("SECRET_KEY") or os.getenv("CREDSTORE_SECRET_KEY")
    if not secret:
        raise RuntimeError("SECRET_KEY (or CREDSTORE_SECRET_KEY) is not set")
    salt = os.getenv("CREDSTORE_SESSION_SALT", "credstore.session.v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def sign_session(session_id: str) -> str:
    s = _serializer()
    return s.dumps({"sid": session_id})


def verify_session(token: str, *, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> Optional[str]:
    """Return the session id carried by a cookie token, or None if invalid/expired."""
    if not token:
        return None
    s = _serializer()
    try:
        data = s.loads(token, max_age=max_age)
        sid = str((data or {}).get("sid") or "").strip()
        return sid or None
    except (BadSignature, BadTimeSignature):
        return None

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request

from credstore.auth.service import AuthService
from credstore.auth.session import COOKIE_NAME, CSRF_HEADER, verify_session
from credstore.config import env_flag
from credstore.storage import SessionLookup


@dataclass(frozen=True)
class CurrentUser:
    username: str
    csrf_token: Optional[str]


def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


async def current_user_optional(request: Request) -> Optional[CurrentUser]:
    u = getattr(request.state, "user", None)
    if u is not None:
        return u
    session_id = verify_session(request.cookies.get(COOKIE_NAME, ""))
    lookup = await get_auth(request).resolve_session(session_id)
    if not lookup:
        return None
    u = CurrentUser(username=lookup.user, csrf_token=lookup.csrf_token)
    request.state.user = u
    return u


async def require_user(user: Optional[CurrentUser] = Depends(current_user_optional)) -> CurrentUser:
    if user:
        return user
    raise HTTPException(status_code=401, detail="Not authenticated")


async def require_csrf(request: Request, user: CurrentUser = Depends(require_user)) -> CurrentUser:
    lookup = SessionLookup(user=user.username, csrf_token=user.csrf_token)
    if not AuthService.verify_csrf(lookup, request.headers.get(CSRF_HEADER)):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")
    return user


def cookie_settings() -> dict:
    secure = env_flag("CREDSTORE_COOKIE_SECURE")
    return {"httponly": True, "samesite": "lax", "secure": secure}

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse

from credstore import config
from credstore.auth.passwords import verify_password
from credstore.auth.service import AuthService
from credstore.auth.session import COOKIE_NAME, DEFAULT_MAX_AGE_SECONDS, sign_session
from credstore.logs import get_logger, setup_logging
from credstore.permissions import CurrentUser, cookie_settings, get_auth, require_csrf, require_user
from credstore.storage import AbstractStorage, StorageType, create_storage

logger = get_logger(__name__)


def _build_storage() -> AbstractStorage:
    if config.STORAGE_TYPE == StorageType.FILE.value:
        config.init_storage_file(config.JSON_FILE_PATH)
    return create_storage(config.STORAGE_TYPE, config.JSON_FILE_PATH)


def create_app(storage: Optional[AbstractStorage] = None) -> FastAPI:
    """Build the app. The storage handle is created once here (or injected) and shared by all requests."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        if getattr(app.state, "storage", None) is None:
            app.state.storage = _build_storage()
            app.state.auth = AuthService(app.state.storage)
        logger.info(f"Storage ready: {app.state.storage!r}")
        yield

    app = FastAPI(title="credstore", lifespan=lifespan)
    if storage is not None:
        app.state.storage = storage
        app.state.auth = AuthService(storage)

    # ------------------ Routes ------------------

    @app.post("/login")
    async def login_post(
        username: str = Form(...),
        password: str = Form(...),
        auth: AuthService = Depends(get_auth),
    ):
        result = await auth.login(username, password)
        if not result:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        resp = JSONResponse({"user": result.user, "csrfToken": result.csrf_token})
        resp.set_cookie(
            COOKIE_NAME,
            sign_session(result.session_id),
            max_age=DEFAULT_MAX_AGE_SECONDS,
            **cookie_settings(),
        )
        return resp

    @app.post("/logout")
    async def logout_post(
        user: CurrentUser = Depends(require_csrf),
        auth: AuthService = Depends(get_auth),
    ):
        await auth.logout(user.username)
        resp = JSONResponse({"ok": True})
        resp.delete_cookie(COOKIE_NAME)
        return resp

    @app.get("/me")
    async def me_get(user: CurrentUser = Depends(require_user)):
        return {"user": user.username, "csrfToken": user.csrf_token}

    @app.post("/password")
    async def password_post(
        current_password: str = Form(...),
        new_password: str = Form(...),
        user: CurrentUser = Depends(require_csrf),
        auth: AuthService = Depends(get_auth),
    ):
        stored = await auth.storage.get_user_password_hash(user.username)
        if not verify_password(stored, current_password):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        if not new_password:
            raise HTTPException(status_code=400, detail="Empty password")
        await auth.set_password(user.username, new_password)
        return {"ok": True}

    return app


app = create_app()

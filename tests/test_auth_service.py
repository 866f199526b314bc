import asyncio

import pytest

from conftest import read_document
from credstore.auth.passwords import hash_password, verify_password
from credstore.auth.service import AuthService
from credstore.auth.session import sign_session, verify_session
from credstore.storage import SessionLookup


def test_hash_and_verify_password():
    h = hash_password("s3cret")
    assert h != "s3cret"
    assert verify_password(h, "s3cret")
    assert not verify_password(h, "wrong")
    assert not verify_password(None, "s3cret")
    assert not verify_password("not-a-hash", "s3cret")


def test_hash_password_rejects_empty():
    with pytest.raises(ValueError):
        hash_password("")


def test_signed_session_round_trip(secret_key):
    token = sign_session("sid-1")
    assert verify_session(token) == "sid-1"
    assert verify_session(token + "x") is None
    assert verify_session("") is None


def test_sign_session_requires_secret(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.delenv("CREDSTORE_SECRET_KEY", raising=False)
    with pytest.raises(RuntimeError):
        sign_session("sid-1")


def test_login_issues_session_and_csrf(storage, storage_path):
    auth = AuthService(storage)

    async def run():
        await auth.set_password("alice", "pw")
        result = await auth.login("alice", "pw")
        return result, await auth.resolve_session(result.session_id)

    result, lookup = asyncio.run(run())
    assert result.user == "alice"
    assert lookup == SessionLookup(user="alice", csrf_token=result.csrf_token)

    stored = read_document(storage_path)["users"]["alice"]
    assert stored["sessionId"] == result.session_id
    assert stored["csrfToken"] == result.csrf_token
    assert verify_password(stored["passwordHash"], "pw")


def test_login_rejects_bad_credentials(storage):
    auth = AuthService(storage)
    asyncio.run(auth.set_password("alice", "pw"))
    assert asyncio.run(auth.login("alice", "nope")) is None
    assert asyncio.run(auth.login("ghost", "pw")) is None
    assert asyncio.run(auth.login("", "pw")) is None


def test_new_login_replaces_previous_session(storage):
    auth = AuthService(storage)

    async def run():
        await auth.set_password("alice", "pw")
        first = await auth.login("alice", "pw")
        second = await auth.login("alice", "pw")
        return (
            await auth.resolve_session(first.session_id),
            await auth.resolve_session(second.session_id),
        )

    old, new = asyncio.run(run())
    assert not old
    assert new.user == "alice"


def test_logout_ends_session(storage):
    auth = AuthService(storage)

    async def run():
        await auth.set_password("alice", "pw")
        result = await auth.login("alice", "pw")
        await auth.logout("alice")
        return await auth.resolve_session(result.session_id)

    assert not asyncio.run(run())


def test_resolve_without_session_id(storage):
    assert asyncio.run(AuthService(storage).resolve_session(None)) == SessionLookup()


def test_verify_csrf():
    lookup = SessionLookup(user="alice", csrf_token="tok")
    assert AuthService.verify_csrf(lookup, "tok")
    assert not AuthService.verify_csrf(lookup, "other")
    assert not AuthService.verify_csrf(lookup, None)
    assert not AuthService.verify_csrf(SessionLookup(user="alice"), "tok")
    assert not AuthService.verify_csrf(SessionLookup(), "tok")

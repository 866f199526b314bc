import asyncio

import pytest
from fastapi.testclient import TestClient

from credstore.app import create_app
from credstore.auth.service import AuthService
from credstore.auth.session import COOKIE_NAME, CSRF_HEADER


@pytest.fixture()
def client(storage, secret_key):
    asyncio.run(AuthService(storage).set_password("alice", "pw"))
    with TestClient(create_app(storage=storage)) as c:
        yield c


def _login(client):
    r = client.post("/login", data={"username": "alice", "password": "pw"})
    assert r.status_code == 200
    return r.json()["csrfToken"]


def test_login_sets_cookie_and_me_works(client):
    csrf = _login(client)
    assert COOKIE_NAME in client.cookies
    r = client.get("/me")
    assert r.status_code == 200
    assert r.json() == {"user": "alice", "csrfToken": csrf}


def test_login_with_wrong_password(client):
    r = client.post("/login", data={"username": "alice", "password": "bad"})
    assert r.status_code == 401


def test_me_requires_session(client):
    assert client.get("/me").status_code == 401


def test_logout_requires_csrf_header(client):
    csrf = _login(client)
    assert client.post("/logout").status_code == 403
    assert client.post("/logout", headers={CSRF_HEADER: "wrong"}).status_code == 403

    r = client.post("/logout", headers={CSRF_HEADER: csrf})
    assert r.status_code == 200
    assert client.get("/me").status_code == 401


def test_change_password(client):
    csrf = _login(client)
    r = client.post(
        "/password",
        data={"current_password": "bad", "new_password": "pw2"},
        headers={CSRF_HEADER: csrf},
    )
    assert r.status_code == 400

    r = client.post(
        "/password",
        data={"current_password": "pw", "new_password": "pw2"},
        headers={CSRF_HEADER: csrf},
    )
    assert r.status_code == 200

    client.cookies.clear()
    assert client.post("/login", data={"username": "alice", "password": "pw"}).status_code == 401
    assert client.post("/login", data={"username": "alice", "password": "pw2"}).status_code == 200

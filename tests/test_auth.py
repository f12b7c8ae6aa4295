"""Tests for authentication endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from .fakes import FakeIdentityService


def test_register_returns_custom_token(client: TestClient, identity: FakeIdentityService):
    response = client.post("/api/auth/register", json={
        "email": "grace@example.com",
        "password": "secret123",
        "displayName": "Grace",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["email"] == "grace@example.com"
    assert body["displayName"] == "Grace"
    assert body["customToken"] == f"custom-{body['uid']}"
    assert body["uid"] in identity.users


def test_register_duplicate_email(client: TestClient):
    response = client.post("/api/auth/register", json={
        "email": "ada@example.com",
        "password": "secret123",
        "displayName": "Ada again",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "User with this email already exists."


@pytest.mark.parametrize("code, message", [
    ("invalid-email", "Invalid email address."),
    ("weak-password", "Password too weak. Use a stronger password."),
    ("quota-exceeded", "Registration error. Please try again."),
])
def test_register_error_messages(client: TestClient, identity: FakeIdentityService, code: str, message: str):
    identity.errors["create_user"] = code

    response = client.post("/api/auth/register", json={
        "email": "new@example.com",
        "password": "secret123",
        "displayName": "New",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == message


def test_register_missing_fields(client: TestClient):
    response = client.post("/api/auth/register", json={"email": "x@example.com"})
    assert response.status_code == 400


def test_signin_sets_session_cookie(client: TestClient):
    response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "uid": "u1", "email": "ada@example.com", "displayName": "Ada"}
    set_cookie = response.headers["set-cookie"]
    assert "session=session-u1" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "Max-Age=432000" in set_cookie
    assert "samesite=lax" in set_cookie.lower()


def test_signin_wrong_password(client: TestClient):
    response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"
    assert "set-cookie" not in response.headers


def test_signin_backend_failure(client: TestClient, identity: FakeIdentityService):
    identity.errors["sign_in_with_password"] = "internal-error"

    response = client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Authentication failed"


def test_session_from_custom_token(client: TestClient):
    response = client.post("/api/auth/session", json={"customToken": "custom-u1"})

    assert response.status_code == 200
    assert response.json()["uid"] == "u1"
    assert response.json()["displayName"] == "Ada"
    assert client.cookies.get("session") == "session-u1"


def test_session_rejects_bad_token(client: TestClient):
    response = client.post("/api/auth/session", json={"idToken": "forged"})
    assert response.status_code == 401


def test_session_requires_a_token(client: TestClient):
    response = client.post("/api/auth/session", json={})
    assert response.status_code == 400


def test_me_requires_session(client: TestClient):
    response = client.get("/api/auth/me")
    assert response.status_code == 401


def test_me_after_signin(client: TestClient):
    client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"})

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["uid"] == "u1"


def test_signout_revokes_and_clears(client: TestClient, identity: FakeIdentityService):
    client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"})

    response = client.post("/api/auth/signout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert identity.revoked == ["u1"]
    assert 'session=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]
    assert client.get("/api/auth/me").status_code == 401


def test_signout_without_session(client: TestClient, identity: FakeIdentityService):
    response = client.post("/api/auth/signout")

    assert response.status_code == 200
    assert identity.revoked == []


def test_signout_revoke_failure(client: TestClient, identity: FakeIdentityService):
    client.post("/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"})
    identity.errors["revoke_refresh_tokens"] = "revoke-failed"

    response = client.post("/api/auth/signout")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to revoke session"

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from support_app import bearer, make_app, register


@pytest.fixture
def app():
    app = make_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}


def test_register_returns_session_envelope_and_refresh_cookie(client):
    response = client.post(
        "/api/auth/register",
        json={"email": "Alice@Example.com", "password": "password123", "firstName": "Alice", "lastName": "Smith"},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["statusCode"] == 201
    assert payload["success"] is True
    assert payload["errors"] == []
    user = payload["data"]["user"]
    assert set(user) == {"_id", "email", "firstName", "lastName", "role"}
    assert user["email"] == "alice@example.com"
    assert user["role"] == "user"
    assert payload["data"]["accessToken"]

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("refreshToken=")
    assert "HttpOnly" in cookie
    assert "SameSite=strict" in cookie
    assert "Max-Age=604800" in cookie
    assert "Path=/" in cookie
    assert "Secure" not in cookie


def test_refresh_cookie_is_secure_in_production():
    with TestClient(make_app(app_env="production"), base_url="https://testserver") as client:
        response = client.post(
            "/api/auth/register",
            json={"email": "a@example.com", "password": "password123", "firstName": "A", "lastName": "B"},
        )

    assert "Secure" in response.headers["set-cookie"]


def test_register_duplicate_email_uses_error_envelope(client):
    register(client)

    response = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "password123", "firstName": "A", "lastName": "B"},
    )

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User already exists", "error": {}}


def test_request_validation_errors_map_to_400(client):
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "password123"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert "firstName" in payload["message"]


def test_error_detail_is_exposed_only_in_development():
    with TestClient(make_app(app_env="development")) as client:
        response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == {"statusCode": 401, "detail": "Access token required"}


def test_login_failures_are_uniform_and_lock_the_account(client):
    register(client)

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "password123"})
    assert unknown.status_code == 401
    assert unknown.json()["message"] == "Invalid credentials"

    for _ in range(5):
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "bad-password"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    locked = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
    assert locked.status_code == 401
    assert locked.json()["message"] == "Invalid credentials"


def test_login_returns_session(client):
    registered = register(client)

    response = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": "password123"})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["_id"] == registered["user"]["_id"]
    assert "refreshToken=" in response.headers["set-cookie"]


def test_profile_requires_access_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"


def test_profile_never_exposes_credentials(client):
    session = register(client)

    response = client.get("/api/auth/profile", headers=bearer(session))

    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["_id"] == session["user"]["_id"]
    assert profile["username"] == "alice"
    for forbidden in ("password", "password_hash", "passwordHash", "loginAttempts", "lockUntil"):
        assert forbidden not in profile
    assert "Authorization" not in response.headers


def test_expired_access_token_is_renewed_from_refresh_cookie(client):
    register(client)

    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-valid-token"})

    assert response.status_code == 200
    renewed = response.headers["Authorization"]
    assert renewed.startswith("Bearer ")
    follow_up = client.get("/api/auth/profile", headers={"Authorization": renewed})
    assert follow_up.status_code == 200


def test_invalid_access_without_cookie_asks_to_login_again(client):
    register(client)
    client.cookies.clear()

    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-valid-token"})

    assert response.status_code == 401
    assert response.json()["message"] == "Please login again"


def test_invalid_refresh_cookie_is_rejected(client):
    register(client)
    client.cookies.clear()
    client.cookies.set("refreshToken", "tampered")

    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-valid-token"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token"


def test_refresh_token_endpoint(client):
    register(client)

    refreshed = client.post("/api/auth/refresh-token")
    assert refreshed.status_code == 200
    assert refreshed.json()["data"]["accessToken"]
    assert "refreshToken=" in refreshed.headers["set-cookie"]

    client.cookies.clear()
    missing = client.post("/api/auth/refresh-token")
    assert missing.status_code == 401
    assert missing.json()["message"] == "Refresh token required"


def test_logout_clears_cookie(client):
    register(client)

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True
    cookie = response.headers["set-cookie"]
    assert cookie.startswith('refreshToken=""') or cookie.startswith("refreshToken=;")
    assert "1970" in cookie


def test_update_profile_rejects_disallowed_fields(client):
    session = register(client)

    rejected = client.put("/api/auth/profile", headers=bearer(session), json={"role": "admin"})
    assert rejected.status_code == 400
    assert rejected.json()["message"] == "Fields not allowed: role"

    empty = client.put("/api/auth/profile", headers=bearer(session), json={})
    assert empty.status_code == 400
    assert empty.json()["message"] == "Update data is required"

    profile = client.get("/api/auth/profile", headers=bearer(session)).json()["data"]
    assert profile["role"] == "user"


def test_update_profile_and_preferences(client):
    session = register(client)

    updated = client.put(
        "/api/auth/profile",
        headers=bearer(session),
        json={"lastName": "Jones", "location": "Lisbon"},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["lastName"] == "Jones"
    assert updated.json()["data"]["profile"]["address"]["city"] == "Lisbon"

    preferences = client.put(
        "/api/auth/profile/preferences",
        headers=bearer(session),
        json={"theme": "dark"},
    )
    assert preferences.status_code == 200
    assert preferences.json()["data"]["theme"] == "dark"
    assert preferences.json()["data"]["language"] == "en"

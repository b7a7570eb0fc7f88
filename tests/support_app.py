from __future__ import annotations

from dataclasses import replace

from fastapi import FastAPI
from sqlalchemy import update

from mediscan.infrastructure.db.models.accounts import USERS
from mediscan.main import create_app
from mediscan.shared.config import Settings


TEST_SETTINGS = Settings(
    app_env="test",
    log_level="WARNING",
    database_url="sqlite://",
    db_create_all=True,
    access_token_secret="access-secret-for-tests-0123456789",
    refresh_token_secret="refresh-secret-for-tests-0123456789",
    access_token_ttl_minutes=15,
    refresh_token_ttl_days=7,
    login_max_attempts=5,
    login_lock_minutes=60,
    cors_origins=("http://localhost:5173",),
    google_client_id="",
    gemini_api_key="",
    gemini_model="gemini-test",
    gemini_api_base="https://vision.test/v1beta",
    gemini_timeout_seconds=5,
)


def make_app(**overrides) -> FastAPI:
    return create_app(replace(TEST_SETTINGS, **overrides))


def register(client, email: str = "alice@example.com", password: str = "password123") -> dict:
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "firstName": "Alice", "lastName": "Smith"},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(session: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {session['accessToken']}"}


def promote_to_admin(app: FastAPI, user_id: str) -> None:
    with app.state.context.engine.begin() as conn:
        conn.execute(update(USERS).where(USERS.c.id == user_id).values(role="admin"))

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from mediscan.application.dto.auth import AuthSessionOutput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.entities.user import UserProfile


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_settings() -> dict[str, Any]:
    return {
        "language": "en",
        "theme": "light",
        "timezone": None,
        "notifications": {"email": True, "push": True, "sms": False},
    }


def available_username(*, email: str, accounts_port: AccountsPort) -> str:
    base = email.split("@", 1)[0] or "user"
    if accounts_port.get_user_by_username(username=base) is None:
        return base
    return f"{base}-{uuid4().hex[:6]}"


def issue_session(*, user: UserProfile, token_port: TokenPort) -> AuthSessionOutput:
    access = token_port.issue_access_token(user_id=user.id)
    refresh = token_port.issue_refresh_token(user_id=user.id)
    return AuthSessionOutput(
        user=user,
        access_token=access.token,
        refresh_token=refresh.token,
        access_expires_at=access.expires_at,
        refresh_expires_at=refresh.expires_at,
    )

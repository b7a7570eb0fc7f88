from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from mediscan.domain.entities.user import (
    Credential,
    ExternalCredential,
    LocalCredential,
    UserAccount,
    UserProfile,
)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timestamps back naive; they are always stored in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def map_row_to_user(row: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(row["id"]),
        email=row["email"],
        username=row["username"],
        first_name=row["first_name"],
        last_name=row["last_name"] or "",
        phone=row.get("phone"),
        role=row["role"],
        is_active=bool(row["is_active"]),
        last_login=as_utc(row.get("last_login")),
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
        profile=_as_dict(row.get("profile")),
        settings=_as_dict(row.get("settings")),
    )


def map_row_to_credential(row: Mapping[str, Any]) -> Credential:
    if row.get("password_hash"):
        return LocalCredential(password_hash=row["password_hash"])
    return ExternalCredential(provider=row["external_provider"], subject=row["external_subject"])


def map_row_to_account(row: Mapping[str, Any]) -> UserAccount:
    return UserAccount(
        user=map_row_to_user(row),
        credential=map_row_to_credential(row),
        login_attempts=int(row["login_attempts"] or 0),
        lock_until=as_utc(row.get("lock_until")),
    )


def credential_columns(credential: Credential) -> dict[str, str | None]:
    if isinstance(credential, LocalCredential):
        return {"password_hash": credential.password_hash, "external_provider": None, "external_subject": None}
    return {
        "password_hash": None,
        "external_provider": credential.provider,
        "external_subject": credential.subject,
    }

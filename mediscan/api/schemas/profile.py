from __future__ import annotations

from datetime import datetime
from typing import Any

from mediscan.domain.entities.user import UserProfile


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def profile_payload(user: UserProfile) -> dict[str, Any]:
    """Public view of a user; credential and lock-out state never appear here."""
    return {
        "_id": user.id,
        "email": user.email,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "fullName": user.full_name,
        "phone": user.phone,
        "role": user.role,
        "isActive": user.is_active,
        "lastLogin": _iso(user.last_login),
        "profile": user.profile,
        "settings": user.settings,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }

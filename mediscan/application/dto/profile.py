from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class UpdateProfileInput:
    user_id: str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class UpdatePreferencesInput:
    user_id: str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class ProfileUpdate:
    first_name: str
    last_name: str
    email: str
    username: str
    phone: str | None
    profile: dict[str, Any]

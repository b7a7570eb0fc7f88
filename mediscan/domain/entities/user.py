from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Union


Role = Literal["user", "admin"]
ROLES: tuple[Role, ...] = ("user", "admin")


@dataclass(frozen=True)
class LocalCredential:
    password_hash: str
    kind: Literal["local"] = "local"


@dataclass(frozen=True)
class ExternalCredential:
    provider: str
    subject: str
    kind: Literal["external"] = "external"


Credential = Union[LocalCredential, ExternalCredential]


@dataclass(frozen=True)
class UserProfile:
    """Credential-free projection of a user record."""

    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    phone: str | None
    role: Role
    is_active: bool
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime
    profile: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class UserAccount:
    """User record including credential and lock-out state. Never leaves the application layer."""

    user: UserProfile
    credential: Credential
    login_attempts: int
    lock_until: datetime | None

    def is_locked(self, now: datetime) -> bool:
        return self.lock_until is not None and self.lock_until > now

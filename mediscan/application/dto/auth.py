from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from mediscan.domain.entities.user import UserProfile


@dataclass(frozen=True)
class RegisterUserInput:
    email: str
    password: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str


@dataclass(frozen=True)
class LoginExternalInput:
    id_token: str


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str | None


@dataclass(frozen=True)
class AuthenticateRequestInput:
    access_token: str | None
    refresh_token: str | None


@dataclass(frozen=True)
class AuthenticatedRequest:
    user: UserProfile
    renewed_access_token: str | None = None


@dataclass(frozen=True)
class AuthSessionOutput:
    user: UserProfile
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenValid:
    user_id: str


@dataclass(frozen=True)
class TokenInvalid:
    reason: str


TokenVerification = Union[TokenValid, TokenInvalid]


@dataclass(frozen=True)
class ExternalIdentityInfo:
    provider: str
    subject: str
    email: str
    email_verified: bool
    first_name: str | None
    last_name: str | None

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from mediscan.application.dto.profile import ProfileUpdate
from mediscan.domain.entities.user import Credential, Role, UserAccount, UserProfile


class AccountsPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> UserProfile | None:
        ...

    def get_user_by_email(self, *, email: str) -> UserProfile | None:
        ...

    def get_user_by_username(self, *, username: str) -> UserProfile | None:
        ...

    def get_account_by_email(self, *, email: str) -> UserAccount | None:
        ...

    def get_account_by_external_subject(self, *, provider: str, subject: str) -> UserAccount | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        username: str,
        first_name: str,
        last_name: str,
        credential: Credential,
        role: Role,
        settings: dict[str, Any],
        created_at: datetime,
    ) -> UserProfile:
        ...

    def update_profile(self, *, user_id: str, update: ProfileUpdate, now: datetime) -> UserProfile | None:
        ...

    def update_settings(self, *, user_id: str, settings: dict[str, Any], now: datetime) -> UserProfile | None:
        ...

    def update_password_hash(self, *, user_id: str, password_hash: str) -> None:
        ...

    def record_login_success(self, *, user_id: str, now: datetime) -> None:
        ...

    def record_login_failure(
        self,
        *,
        user_id: str,
        now: datetime,
        max_attempts: int,
        lock_until: datetime,
    ) -> None:
        ...

    def list_users(self) -> list[UserProfile]:
        ...

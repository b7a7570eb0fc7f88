from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import and_, case, literal, null, or_, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from mediscan.application.dto.profile import ProfileUpdate
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.domain.entities.user import Credential, Role, UserAccount, UserProfile
from mediscan.domain.exceptions import EmailAlreadyExistsError, UsernameAlreadyExistsError
from mediscan.infrastructure.db.mappers.accounts_mapper import (
    credential_columns,
    map_row_to_account,
    map_row_to_user,
)
from mediscan.infrastructure.db.models.accounts import USERS


logger = logging.getLogger(__name__)

# Credential and lock-out columns stay out of profile reads.
_PROFILE_COLUMNS = (
    USERS.c.id,
    USERS.c.email,
    USERS.c.username,
    USERS.c.first_name,
    USERS.c.last_name,
    USERS.c.phone,
    USERS.c.role,
    USERS.c.is_active,
    USERS.c.last_login,
    USERS.c.profile,
    USERS.c.settings,
    USERS.c.created_at,
    USERS.c.updated_at,
)


class SqlAccountsRepository(AccountsPort):
    def __init__(self, engine: Engine):
        self._engine = engine

    def _fetch_user(self, conn: Connection, *where) -> UserProfile | None:
        row = conn.execute(select(*_PROFILE_COLUMNS).where(*where).limit(1)).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def _fetch_account(self, *where) -> UserAccount | None:
        with self._engine.connect() as conn:
            row = conn.execute(select(USERS).where(*where).limit(1)).mappings().first()
        if row is None:
            return None
        return map_row_to_account(row)

    def get_user_by_id(self, *, user_id: str) -> UserProfile | None:
        with self._engine.connect() as conn:
            return self._fetch_user(conn, USERS.c.id == user_id)

    def get_user_by_email(self, *, email: str) -> UserProfile | None:
        with self._engine.connect() as conn:
            return self._fetch_user(conn, USERS.c.email == email.lower())

    def get_user_by_username(self, *, username: str) -> UserProfile | None:
        with self._engine.connect() as conn:
            return self._fetch_user(conn, USERS.c.username == username)

    def get_account_by_email(self, *, email: str) -> UserAccount | None:
        return self._fetch_account(USERS.c.email == email.lower())

    def get_account_by_external_subject(self, *, provider: str, subject: str) -> UserAccount | None:
        return self._fetch_account(
            USERS.c.external_provider == provider,
            USERS.c.external_subject == subject,
        )

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
        values = {
            "id": user_id,
            "email": email.lower(),
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "is_active": True,
            "login_attempts": 0,
            "profile": {},
            "settings": settings,
            "created_at": created_at,
            "updated_at": created_at,
            **credential_columns(credential),
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(USERS.insert().values(**values))
                row = conn.execute(select(*_PROFILE_COLUMNS).where(USERS.c.id == user_id)).mappings().one()
        except IntegrityError as exc:
            logger.info("accounts_repository: create_user conflict user_id=%s", user_id)
            if "username" in str(exc.orig).lower():
                raise UsernameAlreadyExistsError() from exc
            raise EmailAlreadyExistsError() from exc
        return map_row_to_user(row)

    def update_profile(self, *, user_id: str, update: ProfileUpdate, now: datetime) -> UserProfile | None:
        values = {
            "first_name": update.first_name,
            "last_name": update.last_name,
            "email": update.email.lower(),
            "username": update.username,
            "phone": update.phone,
            "profile": update.profile,
            "updated_at": now,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(update_stmt(user_id).values(**values))
                return self._fetch_user(conn, USERS.c.id == user_id)
        except IntegrityError as exc:
            if "username" in str(exc.orig).lower():
                raise UsernameAlreadyExistsError() from exc
            raise EmailAlreadyExistsError("Email already in use") from exc

    def update_settings(self, *, user_id: str, settings: dict[str, Any], now: datetime) -> UserProfile | None:
        with self._engine.begin() as conn:
            conn.execute(update_stmt(user_id).values(settings=settings, updated_at=now))
            return self._fetch_user(conn, USERS.c.id == user_id)

    def update_password_hash(self, *, user_id: str, password_hash: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(update_stmt(user_id).values(password_hash=password_hash))

    def record_login_success(self, *, user_id: str, now: datetime) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update_stmt(user_id).values(login_attempts=0, lock_until=null(), last_login=now)
            )

    def record_login_failure(
        self,
        *,
        user_id: str,
        now: datetime,
        max_attempts: int,
        lock_until: datetime,
    ) -> None:
        # Single statement so concurrent failures cannot lose increments.
        # A lock that has already run out restarts the count from zero.
        lock_expired = and_(USERS.c.lock_until.is_not(None), USERS.c.lock_until <= now)
        attempts = case((lock_expired, 0), else_=USERS.c.login_attempts) + 1
        stmt = (
            update_stmt(user_id)
            .where(or_(USERS.c.lock_until.is_(None), USERS.c.lock_until <= now))
            .values(
                login_attempts=attempts,
                lock_until=case(
                    (attempts >= max_attempts, literal(lock_until, USERS.c.lock_until.type)),
                    else_=null(),
                ),
            )
        )
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount:
            logger.info("accounts_repository: login failure recorded user_id=%s", user_id)

    def list_users(self) -> list[UserProfile]:
        stmt = select(*_PROFILE_COLUMNS).order_by(USERS.c.created_at.asc())
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [map_row_to_user(row) for row in rows]


def update_stmt(user_id: str):
    return update(USERS).where(USERS.c.id == user_id)

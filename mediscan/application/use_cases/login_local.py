from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable

from mediscan.application.dto.auth import AuthSessionOutput, LoginLocalInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.password_hasher_port import PasswordHasherPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.entities.user import LocalCredential
from mediscan.domain.exceptions import InvalidCredentialsError, UserInactiveError

from .auth_common import issue_session, normalize_email, utcnow


logger = logging.getLogger(__name__)


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        max_attempts: int = 5,
        lock_duration: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utcnow,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._max_attempts = max_attempts
        self._lock_duration = lock_duration
        self._clock = clock

    def execute(self, command: LoginLocalInput) -> AuthSessionOutput:
        email = normalize_email(command.email)
        account = self._accounts_port.get_account_by_email(email=email)
        if account is None:
            self._password_hasher.dummy_verify()
            logger.info("login_local: unknown_email")
            raise InvalidCredentialsError()

        now = self._clock()
        user = account.user
        if account.is_locked(now):
            self._password_hasher.dummy_verify()
            logger.warning("login_local: locked user_id=%s lock_until=%s", user.id, account.lock_until)
            raise InvalidCredentialsError()

        credential = account.credential
        if not isinstance(credential, LocalCredential):
            self._password_hasher.dummy_verify()
            logger.info("login_local: external_credential user_id=%s", user.id)
            raise InvalidCredentialsError()

        verified, replacement_hash = self._password_hasher.verify_and_update(
            command.password,
            credential.password_hash,
        )
        if not verified:
            self._accounts_port.record_login_failure(
                user_id=user.id,
                now=now,
                max_attempts=self._max_attempts,
                lock_until=now + self._lock_duration,
            )
            logger.info(
                "login_local: bad_password user_id=%s attempts_before=%s",
                user.id,
                account.login_attempts,
            )
            raise InvalidCredentialsError()

        if not user.is_active:
            raise UserInactiveError()

        if replacement_hash:
            self._accounts_port.update_password_hash(user_id=user.id, password_hash=replacement_hash)
        self._accounts_port.record_login_success(user_id=user.id, now=now)
        logger.info("login_local: success user_id=%s", user.id)
        return issue_session(user=replace(user, last_login=now), token_port=self._token_port)

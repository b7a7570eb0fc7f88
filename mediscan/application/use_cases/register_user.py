from __future__ import annotations

import logging
from uuid import uuid4

from mediscan.application.dto.auth import AuthSessionOutput, RegisterUserInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.password_hasher_port import PasswordHasherPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.entities.user import LocalCredential
from mediscan.domain.exceptions import BadRequestError, EmailAlreadyExistsError

from .auth_common import available_username, default_settings, issue_session, normalize_email, utcnow


logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._accounts_port = accounts_port
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: RegisterUserInput) -> AuthSessionOutput:
        email = normalize_email(command.email)
        first_name = command.first_name.strip()
        last_name = command.last_name.strip()
        password = command.password

        if not email or "@" not in email:
            raise BadRequestError("A valid email is required")
        if not first_name or not last_name:
            raise BadRequestError("First name and last name are required")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise BadRequestError(f"Password must have at least {PASSWORD_MIN_LENGTH} characters")

        if self._accounts_port.get_user_by_email(email=email) is not None:
            raise EmailAlreadyExistsError()

        user = self._accounts_port.create_user(
            user_id=str(uuid4()),
            email=email,
            username=available_username(email=email, accounts_port=self._accounts_port),
            first_name=first_name,
            last_name=last_name,
            credential=LocalCredential(password_hash=self._password_hasher.hash(password)),
            role="user",
            settings=default_settings(),
            created_at=utcnow(),
        )
        logger.info("register_user: created user_id=%s", user.id)
        return issue_session(user=user, token_port=self._token_port)

from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from mediscan.application.dto.auth import AuthSessionOutput, ExternalIdentityInfo, LoginExternalInput
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.external_identity_port import ExternalIdentityPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.entities.user import ExternalCredential, UserProfile
from mediscan.domain.exceptions import (
    EmailAlreadyExistsError,
    ExternalTokenValidationError,
    UserInactiveError,
)

from .auth_common import available_username, default_settings, issue_session, normalize_email, utcnow


logger = logging.getLogger(__name__)


class LoginExternalUseCase:
    """Sign in with a managed identity provider; the first login creates the account."""

    def __init__(
        self,
        *,
        accounts_port: AccountsPort,
        identity_port: ExternalIdentityPort,
        token_port: TokenPort,
    ):
        self._accounts_port = accounts_port
        self._identity_port = identity_port
        self._token_port = token_port

    def execute(self, command: LoginExternalInput) -> AuthSessionOutput:
        id_token = command.id_token.strip()
        if not id_token:
            raise ExternalTokenValidationError("Identity provider token is required")

        identity = self._identity_port.verify_id_token(id_token=id_token)
        now = utcnow()

        account = self._accounts_port.get_account_by_external_subject(
            provider=identity.provider,
            subject=identity.subject,
        )
        if account is not None:
            user = account.user
        else:
            user = self._create_user(identity)

        if not user.is_active:
            raise UserInactiveError()

        self._accounts_port.record_login_success(user_id=user.id, now=now)
        logger.info("login_external: success user_id=%s provider=%s", user.id, identity.provider)
        return issue_session(user=replace(user, last_login=now), token_port=self._token_port)

    def _create_user(self, identity: ExternalIdentityInfo) -> UserProfile:
        email = normalize_email(identity.email)
        if self._accounts_port.get_user_by_email(email=email) is not None:
            # A user record holds exactly one credential kind.
            raise EmailAlreadyExistsError("Email is already registered with another sign-in method")

        fallback_name = email.split("@", 1)[0]
        user = self._accounts_port.create_user(
            user_id=str(uuid4()),
            email=email,
            username=available_username(email=email, accounts_port=self._accounts_port),
            first_name=(identity.first_name or fallback_name).strip(),
            last_name=(identity.last_name or "").strip(),
            credential=ExternalCredential(provider=identity.provider, subject=identity.subject),
            role="user",
            settings=default_settings(),
            created_at=utcnow(),
        )
        logger.info("login_external: created user_id=%s provider=%s", user.id, identity.provider)
        return user

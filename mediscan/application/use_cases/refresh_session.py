from __future__ import annotations

import logging

from mediscan.application.dto.auth import AuthSessionOutput, RefreshSessionInput, TokenInvalid
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.exceptions import RefreshTokenInvalidError, UnauthorizedError, UserInactiveError

from .auth_common import issue_session


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    def __init__(self, *, accounts_port: AccountsPort, token_port: TokenPort):
        self._accounts_port = accounts_port
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AuthSessionOutput:
        token = (command.refresh_token or "").strip()
        if not token:
            raise UnauthorizedError("Refresh token required")

        verification = self._token_port.verify_refresh_token(token=token)
        if isinstance(verification, TokenInvalid):
            logger.info("refresh_session: rejected reason=%s", verification.reason)
            raise RefreshTokenInvalidError()

        user = self._accounts_port.get_user_by_id(user_id=verification.user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        if not user.is_active:
            raise UserInactiveError()

        return issue_session(user=user, token_port=self._token_port)

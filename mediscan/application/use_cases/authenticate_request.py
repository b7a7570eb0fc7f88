from __future__ import annotations

import logging

from mediscan.application.dto.auth import (
    AuthenticatedRequest,
    AuthenticateRequestInput,
    TokenInvalid,
    TokenValid,
)
from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.application.ports.token_port import TokenPort
from mediscan.domain.entities.user import UserProfile
from mediscan.domain.exceptions import RefreshTokenInvalidError, UnauthorizedError, UserInactiveError


logger = logging.getLogger(__name__)


class AuthenticateRequestUseCase:
    """Resolve the caller of a request.

    The bearer access token is tried first. When it does not verify, the refresh
    token from the session cookie is used as a capability to mint a new access
    token, which the caller must hand back to the client.
    """

    def __init__(self, *, accounts_port: AccountsPort, token_port: TokenPort):
        self._accounts_port = accounts_port
        self._token_port = token_port

    def execute(self, command: AuthenticateRequestInput) -> AuthenticatedRequest:
        if not command.access_token:
            raise UnauthorizedError("Access token required")

        access = self._token_port.verify_access_token(token=command.access_token)
        if isinstance(access, TokenValid):
            return AuthenticatedRequest(user=self._load_user(access.user_id))

        if not command.refresh_token:
            raise UnauthorizedError("Please login again")

        refresh = self._token_port.verify_refresh_token(token=command.refresh_token)
        if isinstance(refresh, TokenInvalid):
            logger.info(
                "authenticate_request: refresh_rejected access_reason=%s refresh_reason=%s",
                access.reason,
                refresh.reason,
            )
            raise RefreshTokenInvalidError()

        user = self._load_user(refresh.user_id)
        renewed = self._token_port.issue_access_token(user_id=user.id)
        logger.info("authenticate_request: access_renewed user_id=%s", user.id)
        return AuthenticatedRequest(user=user, renewed_access_token=renewed.token)

    def _load_user(self, user_id: str) -> UserProfile:
        user = self._accounts_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        if not user.is_active:
            raise UserInactiveError()
        return user

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from mediscan.application.dto.auth import IssuedToken, TokenInvalid, TokenValid, TokenVerification
from mediscan.application.ports.token_port import TokenPort


ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
_ALGORITHM = "HS256"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenService(TokenPort):
    """Issues and verifies HS256 access and refresh tokens.

    Each token class is signed with its own secret and carries a ``type`` claim,
    so an access token never verifies as a refresh token and vice versa.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh token secrets must differ.")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_ttl = timedelta(minutes=access_ttl_minutes)
        self._refresh_ttl = timedelta(days=refresh_ttl_days)
        self._clock = clock

    def issue_access_token(self, *, user_id: str) -> IssuedToken:
        return self._issue(user_id=user_id, token_type=ACCESS_TOKEN_TYPE, secret=self._access_secret, ttl=self._access_ttl)

    def issue_refresh_token(self, *, user_id: str) -> IssuedToken:
        return self._issue(
            user_id=user_id,
            token_type=REFRESH_TOKEN_TYPE,
            secret=self._refresh_secret,
            ttl=self._refresh_ttl,
        )

    def verify_access_token(self, *, token: str) -> TokenVerification:
        return self._verify(token=token, token_type=ACCESS_TOKEN_TYPE, secret=self._access_secret)

    def verify_refresh_token(self, *, token: str) -> TokenVerification:
        return self._verify(token=token, token_type=REFRESH_TOKEN_TYPE, secret=self._refresh_secret)

    def _issue(self, *, user_id: str, token_type: str, secret: str, ttl: timedelta) -> IssuedToken:
        now = self._clock()
        exp = now + ttl
        payload = {
            "id": user_id,
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        token = jwt.encode(payload, secret, algorithm=_ALGORITHM)
        return IssuedToken(token=token, expires_at=exp)

    def _verify(self, *, token: str, token_type: str, secret: str) -> TokenVerification:
        if not token:
            return TokenInvalid(reason="missing")
        try:
            payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
        except jwt.ExpiredSignatureError:
            return TokenInvalid(reason="expired")
        except jwt.PyJWTError:
            return TokenInvalid(reason="malformed")

        if payload.get("type") != token_type:
            return TokenInvalid(reason="wrong_type")

        user_id = payload.get("id")
        if not user_id or not isinstance(user_id, str):
            return TokenInvalid(reason="malformed")
        return TokenValid(user_id=user_id)

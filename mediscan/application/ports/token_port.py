from __future__ import annotations

from typing import Protocol

from mediscan.application.dto.auth import IssuedToken, TokenVerification


class TokenPort(Protocol):
    def issue_access_token(self, *, user_id: str) -> IssuedToken:
        ...

    def issue_refresh_token(self, *, user_id: str) -> IssuedToken:
        ...

    def verify_access_token(self, *, token: str) -> TokenVerification:
        ...

    def verify_refresh_token(self, *, token: str) -> TokenVerification:
        ...

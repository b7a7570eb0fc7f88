from __future__ import annotations

from typing import Protocol

from mediscan.application.dto.auth import ExternalIdentityInfo


class ExternalIdentityPort(Protocol):
    def verify_id_token(self, *, id_token: str) -> ExternalIdentityInfo:
        ...

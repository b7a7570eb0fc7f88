from __future__ import annotations

from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.domain.entities.user import UserProfile
from mediscan.domain.exceptions import UserNotFoundError


class GetProfileUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self, *, user_id: str) -> UserProfile:
        user = self._accounts_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError()
        return user

from __future__ import annotations

from mediscan.application.ports.accounts_port import AccountsPort
from mediscan.domain.entities.user import UserProfile


class ListUsersUseCase:
    def __init__(self, *, accounts_port: AccountsPort):
        self._accounts_port = accounts_port

    def execute(self) -> list[UserProfile]:
        return self._accounts_port.list_users()

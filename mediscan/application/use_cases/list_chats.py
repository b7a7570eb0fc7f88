from __future__ import annotations

from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.entities.chat import Chat


class ListChatsUseCase:
    def __init__(self, *, chats_port: ChatsPort):
        self._chats_port = chats_port

    def execute(self, *, user_id: str) -> list[Chat]:
        chats = self._chats_port.list_chats(user_id=user_id)
        return sorted(chats, key=lambda chat: chat.updated_at, reverse=True)

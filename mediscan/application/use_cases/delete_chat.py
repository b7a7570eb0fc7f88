from __future__ import annotations

from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.exceptions import ChatNotFoundError


class DeleteChatUseCase:
    def __init__(self, *, chats_port: ChatsPort):
        self._chats_port = chats_port

    def execute(self, *, user_id: str, chat_id: str) -> None:
        if not self._chats_port.delete_chat(user_id=user_id, chat_id=chat_id):
            raise ChatNotFoundError()

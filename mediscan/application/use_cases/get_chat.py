from __future__ import annotations

from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.entities.chat import Chat
from mediscan.domain.exceptions import ChatNotFoundError


class GetChatUseCase:
    def __init__(self, *, chats_port: ChatsPort):
        self._chats_port = chats_port

    def execute(self, *, user_id: str, chat_id: str) -> Chat:
        chat = self._chats_port.get_chat(user_id=user_id, chat_id=chat_id)
        if chat is None:
            raise ChatNotFoundError()
        return chat

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from mediscan.domain.entities.chat import Chat, ChatMessage


class ChatsPort(Protocol):
    def list_chats(self, *, user_id: str) -> list[Chat]:
        ...

    def get_chat(self, *, user_id: str, chat_id: str) -> Chat | None:
        ...

    def create_chat(
        self,
        *,
        chat_id: str,
        user_id: str,
        title: str,
        messages: list[ChatMessage],
        created_at: datetime,
    ) -> Chat:
        ...

    def append_messages(
        self,
        *,
        user_id: str,
        chat_id: str,
        messages: list[ChatMessage],
        now: datetime,
    ) -> Chat | None:
        ...

    def delete_chat(self, *, user_id: str, chat_id: str) -> bool:
        ...

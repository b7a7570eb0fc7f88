from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


MessageRole = Literal["user", "assistant", "system"]


@dataclass(frozen=True)
class ChatMessage:
    role: MessageRole
    content: str
    timestamp: datetime


@dataclass(frozen=True)
class Chat:
    id: str
    user_id: str
    title: str
    messages: tuple[ChatMessage, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def last_message(self) -> ChatMessage | None:
        return self.messages[-1] if self.messages else None

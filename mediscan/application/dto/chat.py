from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CreateChatInput:
    user_id: str
    title: str | None


@dataclass(frozen=True)
class SendChatMessageInput:
    user_id: str
    chat_id: str
    message: str | None

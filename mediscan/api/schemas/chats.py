from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mediscan.domain.entities.chat import Chat, ChatMessage


class CreateChatRequest(BaseModel):
    title: str | None = None


class SendMessageRequest(BaseModel):
    message: str | None = Field(default=None, max_length=10_000)


def message_payload(message: ChatMessage) -> dict[str, Any]:
    return {
        "role": message.role,
        "content": message.content,
        "timestamp": message.timestamp.isoformat(),
    }


def chat_summary_payload(chat: Chat) -> dict[str, Any]:
    last = chat.last_message
    return {
        "_id": chat.id,
        "title": chat.title,
        "lastMessage": last.content if last is not None else None,
        "messageCount": len(chat.messages),
        "createdAt": chat.created_at.isoformat(),
        "updatedAt": chat.updated_at.isoformat(),
    }


def chat_payload(chat: Chat) -> dict[str, Any]:
    return {
        "_id": chat.id,
        "userId": chat.user_id,
        "title": chat.title,
        "messages": [message_payload(message) for message in chat.messages],
        "createdAt": chat.created_at.isoformat(),
        "updatedAt": chat.updated_at.isoformat(),
    }

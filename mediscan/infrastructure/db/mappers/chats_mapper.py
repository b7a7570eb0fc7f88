from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from mediscan.domain.entities.chat import Chat, ChatMessage
from mediscan.infrastructure.db.mappers.accounts_mapper import as_utc


def map_message_to_doc(message: ChatMessage) -> dict[str, Any]:
    return {
        "role": message.role,
        "content": message.content,
        "timestamp": message.timestamp.isoformat(),
    }


def map_doc_to_message(doc: Mapping[str, Any]) -> ChatMessage:
    return ChatMessage(
        role=doc["role"],
        content=doc["content"],
        timestamp=as_utc(datetime.fromisoformat(doc["timestamp"])),
    )


def map_messages_to_docs(messages: Iterable[ChatMessage]) -> list[dict[str, Any]]:
    return [map_message_to_doc(message) for message in messages]


def map_row_to_chat(row: Mapping[str, Any]) -> Chat:
    return Chat(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=row["title"],
        messages=tuple(map_doc_to_message(doc) for doc in row["messages"] or []),
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )

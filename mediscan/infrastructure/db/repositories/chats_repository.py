from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine

from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.entities.chat import Chat, ChatMessage
from mediscan.infrastructure.db.mappers.chats_mapper import map_messages_to_docs, map_row_to_chat
from mediscan.infrastructure.db.models.chats import CHATS


class SqlChatsRepository(ChatsPort):
    def __init__(self, engine: Engine):
        self._engine = engine

    def list_chats(self, *, user_id: str) -> list[Chat]:
        stmt = select(CHATS).where(CHATS.c.user_id == user_id).order_by(CHATS.c.updated_at.desc())
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [map_row_to_chat(row) for row in rows]

    def get_chat(self, *, user_id: str, chat_id: str) -> Chat | None:
        stmt = select(CHATS).where(CHATS.c.id == chat_id, CHATS.c.user_id == user_id).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            return None
        return map_row_to_chat(row)

    def create_chat(
        self,
        *,
        chat_id: str,
        user_id: str,
        title: str,
        messages: list[ChatMessage],
        created_at: datetime,
    ) -> Chat:
        with self._engine.begin() as conn:
            conn.execute(
                CHATS.insert().values(
                    id=chat_id,
                    user_id=user_id,
                    title=title,
                    messages=map_messages_to_docs(messages),
                    created_at=created_at,
                    updated_at=created_at,
                )
            )
            row = conn.execute(select(CHATS).where(CHATS.c.id == chat_id)).mappings().one()
        return map_row_to_chat(row)

    def append_messages(
        self,
        *,
        user_id: str,
        chat_id: str,
        messages: list[ChatMessage],
        now: datetime,
    ) -> Chat | None:
        owned = (CHATS.c.id == chat_id, CHATS.c.user_id == user_id)
        with self._engine.begin() as conn:
            row = conn.execute(select(CHATS.c.messages).where(*owned).with_for_update()).mappings().first()
            if row is None:
                return None
            stored = list(row["messages"] or []) + map_messages_to_docs(messages)
            conn.execute(CHATS.update().where(*owned).values(messages=stored, updated_at=now))
            updated = conn.execute(select(CHATS).where(*owned)).mappings().one()
        return map_row_to_chat(updated)

    def delete_chat(self, *, user_id: str, chat_id: str) -> bool:
        stmt = delete(CHATS).where(CHATS.c.id == chat_id, CHATS.c.user_id == user_id)
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0

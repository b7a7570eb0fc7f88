from __future__ import annotations

from uuid import uuid4

from mediscan.application.dto.chat import CreateChatInput
from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.entities.chat import Chat, ChatMessage
from mediscan.domain.exceptions import BadRequestError

from .auth_common import utcnow


DEFAULT_CHAT_TITLE = "New Chat"
CHAT_TITLE_MAX_LENGTH = 200
ASSISTANT_GREETING = "Hello! I'm your MediScan AI assistant. How can I help you today?"


class CreateChatUseCase:
    def __init__(self, *, chats_port: ChatsPort):
        self._chats_port = chats_port

    def execute(self, command: CreateChatInput) -> Chat:
        title = (command.title or "").strip() or DEFAULT_CHAT_TITLE
        if len(title) > CHAT_TITLE_MAX_LENGTH:
            raise BadRequestError(f"Chat title must have at most {CHAT_TITLE_MAX_LENGTH} characters")

        now = utcnow()
        return self._chats_port.create_chat(
            chat_id=str(uuid4()),
            user_id=command.user_id,
            title=title,
            messages=[ChatMessage(role="assistant", content=ASSISTANT_GREETING, timestamp=now)],
            created_at=now,
        )

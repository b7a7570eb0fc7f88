from __future__ import annotations

import logging

from mediscan.application.dto.chat import SendChatMessageInput
from mediscan.application.ports.chats_port import ChatsPort
from mediscan.domain.entities.chat import Chat, ChatMessage
from mediscan.domain.exceptions import BadRequestError, ChatNotFoundError

from .auth_common import utcnow


logger = logging.getLogger(__name__)

ASSISTANT_PLACEHOLDER_REPLY = (
    "I understand your question about medical concerns. Let me help you with that. "
    "For personal medical advice, please consult a healthcare professional."
)


class SendChatMessageUseCase:
    def __init__(self, *, chats_port: ChatsPort):
        self._chats_port = chats_port

    def execute(self, command: SendChatMessageInput) -> Chat:
        content = (command.message or "").strip()
        if not content:
            raise BadRequestError("Message content is required")

        now = utcnow()
        chat = self._chats_port.append_messages(
            user_id=command.user_id,
            chat_id=command.chat_id,
            messages=[
                ChatMessage(role="user", content=content, timestamp=now),
                ChatMessage(role="assistant", content=ASSISTANT_PLACEHOLDER_REPLY, timestamp=now),
            ],
            now=now,
        )
        if chat is None:
            raise ChatNotFoundError()
        logger.debug("send_chat_message: appended chat_id=%s messages=%s", chat.id, len(chat.messages))
        return chat

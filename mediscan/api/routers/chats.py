from __future__ import annotations

from fastapi import APIRouter, Depends

from mediscan.api.deps import (
    get_create_chat_use_case,
    get_delete_chat_use_case,
    get_get_chat_use_case,
    get_list_chats_use_case,
    get_send_chat_message_use_case,
    protect,
)
from mediscan.api.schemas.chats import (
    CreateChatRequest,
    SendMessageRequest,
    chat_payload,
    chat_summary_payload,
)
from mediscan.api.schemas.common import ApiResponse, api_response
from mediscan.application.dto.chat import CreateChatInput, SendChatMessageInput
from mediscan.application.use_cases.create_chat import CreateChatUseCase
from mediscan.application.use_cases.delete_chat import DeleteChatUseCase
from mediscan.application.use_cases.get_chat import GetChatUseCase
from mediscan.application.use_cases.list_chats import ListChatsUseCase
from mediscan.application.use_cases.send_chat_message import SendChatMessageUseCase
from mediscan.domain.entities.user import UserProfile


router = APIRouter(prefix="/api/chats")


@router.get("", response_model=ApiResponse)
def list_chats(
    user: UserProfile = Depends(protect),
    use_case: ListChatsUseCase = Depends(get_list_chats_use_case),
):
    chats = use_case.execute(user_id=user.id)
    return api_response([chat_summary_payload(chat) for chat in chats], message="Chats retrieved")


@router.post("", response_model=ApiResponse, status_code=201)
def create_chat(
    req: CreateChatRequest | None = None,
    user: UserProfile = Depends(protect),
    use_case: CreateChatUseCase = Depends(get_create_chat_use_case),
):
    title = req.title if req is not None else None
    chat = use_case.execute(CreateChatInput(user_id=user.id, title=title))
    return api_response(chat_payload(chat), status_code=201, message="Chat created")


@router.get("/{chat_id}", response_model=ApiResponse)
def get_chat(
    chat_id: str,
    user: UserProfile = Depends(protect),
    use_case: GetChatUseCase = Depends(get_get_chat_use_case),
):
    chat = use_case.execute(user_id=user.id, chat_id=chat_id)
    return api_response(chat_payload(chat), message="Chat retrieved")


@router.post("/{chat_id}/messages", response_model=ApiResponse)
def send_message(
    chat_id: str,
    req: SendMessageRequest,
    user: UserProfile = Depends(protect),
    use_case: SendChatMessageUseCase = Depends(get_send_chat_message_use_case),
):
    chat = use_case.execute(SendChatMessageInput(user_id=user.id, chat_id=chat_id, message=req.message))
    return api_response(chat_payload(chat), message="Message sent")


@router.delete("/{chat_id}", response_model=ApiResponse)
def delete_chat(
    chat_id: str,
    user: UserProfile = Depends(protect),
    use_case: DeleteChatUseCase = Depends(get_delete_chat_use_case),
):
    use_case.execute(user_id=user.id, chat_id=chat_id)
    return api_response(None, message="Chat deleted")

"""Chat endpoints; every route requires a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from app.core.config import settings
from app.core.rate_limit import limiter
from app.dependencies import (
    get_chat_service,
    get_conversation_service,
    require_ownership,
)
from app.schemas.chat_schema import (
    ChatHistoryResponse,
    ConversationDetailResponse,
    DeleteChatResponse,
    NewChatResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from app.schemas.response_schema import ApiResponse, success_response
from app.services.chat_service import ChatService
from app.services.conversation_service import ConversationService

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
    dependencies=[Depends(require_ownership("user_id"))],
)

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
ConversationServiceDep = Annotated[
    ConversationService, Depends(get_conversation_service)
]


@router.post("/send", response_model=ApiResponse[SendMessageResponse])
@limiter.limit(settings.rate_limit.chat)
async def send_message(
    request: Request,
    body: SendMessageRequest,
    chat_service: ChatServiceDep,
) -> dict:
    """Send a message; the reply is always an assistant turn."""
    result = await chat_service.send(body.message)
    return success_response(result)


@router.get("/history", response_model=ApiResponse[ChatHistoryResponse])
async def chat_history(
    service: ConversationServiceDep,
    limit: int = Query(default=settings.chat.history_default_limit, ge=1, le=100),
) -> dict:
    """List the caller's conversations, most recently updated first."""
    result = await service.history(limit=limit)
    return success_response(result)


@router.post(
    "/new",
    response_model=ApiResponse[NewChatResponse],
    status_code=status.HTTP_201_CREATED,
)
async def new_chat(service: ConversationServiceDep) -> dict:
    """Start an empty conversation."""
    result = await service.new_chat()
    return success_response(
        result, status=201, message="New chat created successfully"
    )


@router.get("/{chat_id}", response_model=ApiResponse[ConversationDetailResponse])
async def get_chat(chat_id: str, service: ConversationServiceDep) -> dict:
    """Return one conversation with all of its turns."""
    result = await service.get(chat_id)
    return success_response(ConversationDetailResponse(chat=result))


@router.delete("/{chat_id}", response_model=ApiResponse[DeleteChatResponse])
async def delete_chat(chat_id: str, service: ConversationServiceDep) -> dict:
    """Soft-delete a conversation."""
    result = await service.delete(chat_id)
    return success_response(result, message="Chat deleted successfully")

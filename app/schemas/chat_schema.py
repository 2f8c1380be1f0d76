"""Chat request and response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings


class ChatMessage(BaseModel):
    """Role/content pair handed to the completion gateway."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    role: Literal["user", "assistant"]
    content: str


class SendMessageRequest(BaseModel):
    """Body of POST /chat/send."""

    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def check_length(cls, v: str) -> str:
        limit = settings.chat.max_message_length
        if len(v) > limit:
            raise ValueError(f"Message must be between 1 and {limit} characters")
        return v


class SendMessageResponse(BaseModel):
    """Assistant reply plus the conversation it was appended to."""

    message: str
    chat_id: str
    message_count: int


class TurnResponse(BaseModel):
    """Single turn of a conversation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    role: str
    content: str
    timestamp: datetime


class ConversationResponse(BaseModel):
    """Full conversation with its turns."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    title: str | None = None
    turns: list[TurnResponse]
    created_at: datetime
    updated_at: datetime


class ConversationDetailResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat: ConversationResponse


class ConversationSummary(BaseModel):
    """History list entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    message_count: int
    last_message: TurnResponse | None = None
    created_at: datetime
    updated_at: datetime


class ChatHistoryResponse(BaseModel):
    """Recent conversations, most recently updated first."""

    model_config = ConfigDict(frozen=True)

    chats: list[ConversationSummary]
    limit: int
    total: int


class NewChatDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    title: str | None = None
    created_at: datetime


class NewChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat: NewChatDescriptor


class DeleteChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    chat_id: str

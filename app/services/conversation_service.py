"""Conversation history, lookup, creation and soft deletion."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConversationNotFoundError
from app.models.conversation import Conversation
from app.repositories.chat_repo import ChatRepository
from app.schemas.chat_schema import (
    ChatHistoryResponse,
    ConversationResponse,
    ConversationSummary,
    DeleteChatResponse,
    NewChatDescriptor,
    NewChatResponse,
    TurnResponse,
)

logger = structlog.get_logger()


def summarize(conversation: Conversation) -> ConversationSummary:
    """Build the history entry for one conversation."""
    last = conversation.last_turn
    return ConversationSummary(
        id=conversation.id,
        title=conversation.title or f"Chat {conversation.id[-4:]}",
        message_count=len(conversation.turns),
        last_message=TurnResponse.model_validate(last) if last else None,
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


class ConversationService:
    """Conversation queries scoped to the authenticated user.

    Conversations of other users and soft-deleted ones are reported as not
    found so their existence is never revealed.
    """

    def __init__(
        self, chat_repo: ChatRepository, session: AsyncSession, user_id: int
    ) -> None:
        self._chat_repo = chat_repo
        self._session = session
        self._user_id = user_id

    async def history(self, limit: int = 10) -> ChatHistoryResponse:
        """Most recently updated conversations first."""
        conversations = await self._chat_repo.list_recent(self._user_id, limit)
        total = await self._chat_repo.count_active(self._user_id)
        return ChatHistoryResponse(
            chats=[summarize(c) for c in conversations],
            limit=limit,
            total=total,
        )

    async def get(self, chat_id: str) -> ConversationResponse:
        conversation = await self._load(chat_id)
        return ConversationResponse.model_validate(conversation)

    async def new_chat(self) -> NewChatResponse:
        """Start an empty conversation titled with the placeholder."""
        conversation = await self._chat_repo.create(self._user_id)
        await self._session.commit()
        logger.info("Chat created", user_id=self._user_id, chat_id=conversation.id)
        return NewChatResponse(chat=NewChatDescriptor.model_validate(conversation))

    async def delete(self, chat_id: str) -> DeleteChatResponse:
        """Soft-delete; a second delete of the same id is NotFound."""
        conversation = await self._load(chat_id)
        self._chat_repo.mark_deleted(conversation)
        await self._chat_repo.save(conversation)
        await self._session.commit()
        logger.info("Chat deleted", user_id=self._user_id, chat_id=chat_id)
        return DeleteChatResponse(chat_id=chat_id)

    async def _load(self, chat_id: str) -> Conversation:
        conversation = await self._chat_repo.find_owned(chat_id, self._user_id)
        if conversation is None:
            raise ConversationNotFoundError
        return conversation

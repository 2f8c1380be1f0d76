"""Chat repository for conversation and turn persistence."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import utcnow
from app.models.conversation import (
    NEW_CHAT_TITLE,
    Conversation,
    ConversationState,
    Turn,
    TurnRole,
)

TITLE_MAX_LENGTH = 50

# Ties on updated_at resolve the same way for "current chat" and history.
RECENT_FIRST = (
    Conversation.updated_at.desc(),
    Conversation.created_at.desc(),
    Conversation.id.desc(),
)


def derive_title(conversation: Conversation) -> None:
    """Name the conversation after its first user message.

    Applies only on the first exchange (at most two turns) and only while the
    title is unset or still the placeholder.
    """
    if len(conversation.turns) > 2:
        return
    if conversation.title and conversation.title != NEW_CHAT_TITLE:
        return
    first_user_turn = next(
        (t for t in conversation.turns if t.role == TurnRole.USER), None
    )
    if first_user_turn is None:
        return
    text = first_user_turn.content
    title = text[:TITLE_MAX_LENGTH]
    if len(text) > TITLE_MAX_LENGTH:
        title += "..."
    conversation.title = title


class ChatRepository:
    """Encapsulates conversation queries; soft-deleted rows are never returned."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _active(self, user_id: int):  # type: ignore[no-untyped-def]
        return select(Conversation).where(
            Conversation.user_id == user_id,
            Conversation.is_active.is_(True),
        )

    async def find_latest_active(self, user_id: int) -> Conversation | None:
        """Most-recently-updated active conversation of the user."""
        result = await self._session.execute(
            self._active(user_id).order_by(*RECENT_FIRST).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_or_create_active(self, user_id: int) -> Conversation:
        """Return the current conversation, or a new unsaved empty one."""
        conversation = await self.find_latest_active(user_id)
        if conversation is None:
            conversation = Conversation(
                id=str(uuid.uuid4()),
                user_id=user_id,
                title=None,
                is_active=True,
                turns=[],
            )
        return conversation

    async def create(
        self, user_id: int, title: str | None = NEW_CHAT_TITLE
    ) -> Conversation:
        """Persist a new empty conversation."""
        now = utcnow()
        conversation = Conversation(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            is_active=True,
            created_at=now,
            updated_at=now,
            turns=[],
        )
        return await self.save(conversation)

    async def find_owned(self, conversation_id: str, user_id: int) -> Conversation | None:
        """Find an active conversation by id, scoped to its owner."""
        result = await self._session.execute(
            self._active(user_id).where(Conversation.id == conversation_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(self, user_id: int, limit: int) -> list[Conversation]:
        """Active conversations, most recently updated first."""
        result = await self._session.execute(
            self._active(user_id)
            .order_by(*RECENT_FIRST)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_active(self, user_id: int) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(Conversation)
            .where(
                Conversation.user_id == user_id,
                Conversation.is_active.is_(True),
            )
        )
        return int(result.scalar_one())

    @staticmethod
    def append_turn(conversation: Conversation, role: TurnRole, content: str) -> Turn:
        """Append a turn in memory and stamp the conversation as updated."""
        now = utcnow()
        turn = Turn(
            position=len(conversation.turns),
            role=role.value,
            content=content.strip(),
            timestamp=now,
        )
        conversation.turns.append(turn)
        conversation.updated_at = now
        return turn

    @staticmethod
    def mark_deleted(conversation: Conversation) -> None:
        conversation.state = ConversationState.DELETED
        conversation.updated_at = utcnow()

    async def save(self, conversation: Conversation) -> Conversation:
        """Write the conversation and any new turns in one flush."""
        self._session.add(conversation)
        await self._session.flush()
        return conversation

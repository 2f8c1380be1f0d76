"""Conversation and turn database models."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, Timestamp, utcnow

NEW_CHAT_TITLE = "New Chat"


class ConversationState(StrEnum):
    """Lifecycle of a conversation; DELETED is stored as is_active=False."""

    ACTIVE = "active"
    DELETED = "deleted"


class TurnRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class Conversation(Base):
    """Ordered, append-only exchange between one user and the assistant."""

    __tablename__ = "conversations"
    __table_args__ = (
        Index(
            "ix_conversations_user_id_is_active_updated_at",
            "user_id",
            "is_active",
            "updated_at",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        Timestamp, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        Timestamp, nullable=False, default=utcnow
    )

    turns: Mapped[list["Turn"]] = relationship(
        back_populates="conversation",
        order_by="Turn.position",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def state(self) -> ConversationState:
        return ConversationState.ACTIVE if self.is_active else ConversationState.DELETED

    @state.setter
    def state(self, value: ConversationState) -> None:
        self.is_active = value is ConversationState.ACTIVE

    @property
    def last_turn(self) -> "Turn | None":
        return self.turns[-1] if self.turns else None


class Turn(Base):
    """Single immutable message inside a conversation."""

    __tablename__ = "turns"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    conversation_id: Mapped[str] = mapped_column(
        ForeignKey("conversations.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        Timestamp, nullable=False, default=utcnow
    )

    conversation: Mapped[Conversation] = relationship(back_populates="turns")

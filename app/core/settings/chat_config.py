"""Chat request configuration."""

from pydantic import BaseModel


class ChatConfig(BaseModel, frozen=True):
    """Chat message and history limits."""

    max_message_length: int
    history_default_limit: int

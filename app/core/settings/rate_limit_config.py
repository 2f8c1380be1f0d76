"""Rate limit configuration."""

from pydantic import BaseModel


class RateLimitConfig(BaseModel, frozen=True):
    """slowapi limit strings per route group."""

    enabled: bool
    default: str
    auth: str
    chat: str

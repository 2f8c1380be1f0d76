"""Redis configuration (failed-login counters)."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection URL."""

    url: str

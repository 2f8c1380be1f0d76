"""Uvicorn server configuration."""

from pydantic import BaseModel


class ServerConfig(BaseModel, frozen=True):
    """Bind address for the API server."""

    host: str
    port: int
    reload: bool

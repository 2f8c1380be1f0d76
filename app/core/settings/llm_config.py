"""Completion API configuration."""

from pydantic import BaseModel, SecretStr


class LLMConfig(BaseModel, frozen=True):
    """OpenAI-compatible completion endpoint settings."""

    api_url: str
    api_key: SecretStr
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float
    max_retries: int
    max_context_turns: int
    app_url: str
    app_title: str

    @property
    def is_configured(self) -> bool:
        """Check if an API key is present."""
        return bool(self.api_key.get_secret_value())

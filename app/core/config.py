"""Application configuration using Pydantic Settings V2."""

from functools import cached_property

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.settings import (
    AppConfig,
    AuthConfig,
    ChatConfig,
    CorsConfig,
    DatabaseConfig,
    LLMConfig,
    RateLimitConfig,
    RedisConfig,
    ServerConfig,
)
from app.core.settings.app_config import Environment


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.llm.model).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="AI Customer Support API",
        description="Application name",
    )
    app_version: str = Field(default="1.0.0", description="API version")
    app_env: Environment = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode (Starlette traceback pages)",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Server port",
    )
    reload: bool = Field(default=False, description="Auto-reload on code change")

    # JWT Auth
    jwt_secret_key: SecretStr = Field(
        description="JWT secret key for token signing (required, no fallback)",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    jwt_issuer: str = Field(
        default="support-chat",
        description="Issuer claim written to and required on every token",
    )
    jwt_access_token_expire_minutes: int = Field(
        default=1440,
        ge=1,
        le=43200,
        description="Access token expiration in minutes",
    )
    max_login_attempts: int = Field(
        default=5,
        ge=1,
        description="Failed logins allowed before the account is locked",
    )
    login_lockout_seconds: int = Field(
        default=300,
        ge=1,
        description="Window for counting failed logins",
    )

    # Database
    database_url: SecretStr = Field(
        description="Async database URL (mysql+aiomysql://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )

    # Completion API (OpenAI-compatible, OpenRouter by default)
    ai_api_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the completion API",
    )
    openrouter_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Completion API key",
    )
    ai_model: str = Field(
        default="google/gemma-3-4b-it:free",
        description="Completion model name",
    )
    ai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    ai_max_tokens: int = Field(default=150, ge=1, le=8192)
    ai_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=120,
        description="Timeout for the single completion request",
    )
    ai_max_retries: int = Field(
        default=0,
        ge=0,
        le=3,
        description="Opt-in SDK retries for the completion request",
    )
    ai_max_context_turns: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Most recent turns sent as completion context",
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Client URL sent as HTTP-Referer to the completion API",
    )
    app_title: str = Field(
        default="AI Customer Support",
        description="Application title sent as X-Title to the completion API",
    )

    # Chat
    chat_max_message_length: int = Field(
        default=1000,
        ge=1,
        le=2000,
        description="Maximum user message length after trimming",
    )
    chat_history_default_limit: int = Field(default=10, ge=1, le=100)

    # CORS
    cors_allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Comma-separated list of allowed origins",
    )

    # Rate limits (slowapi limit strings)
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_default: str = Field(default="100/15minutes")
    rate_limit_auth: str = Field(default="5/15minutes")
    rate_limit_chat: str = Field(default="20/minute")

    @field_validator("jwt_secret_key")
    @classmethod
    def require_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET_KEY must be set")
        return v

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            version=self.app_version,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(host=self.host, port=self.port, reload=self.reload)

    @cached_property
    def auth(self) -> AuthConfig:
        """JWT authentication configuration."""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            issuer=self.jwt_issuer,
            access_token_expire_minutes=self.jwt_access_token_expire_minutes,
            max_login_attempts=self.max_login_attempts,
            login_lockout_seconds=self.login_lockout_seconds,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url)

    @cached_property
    def llm(self) -> LLMConfig:
        """Completion API configuration."""
        return LLMConfig(
            api_url=self.ai_api_url,
            api_key=self.openrouter_api_key,
            model=self.ai_model,
            temperature=self.ai_temperature,
            max_tokens=self.ai_max_tokens,
            timeout_seconds=self.ai_timeout_seconds,
            max_retries=self.ai_max_retries,
            max_context_turns=self.ai_max_context_turns,
            app_url=self.app_url,
            app_title=self.app_title,
        )

    @cached_property
    def chat(self) -> ChatConfig:
        """Chat limits."""
        return ChatConfig(
            max_message_length=self.chat_max_message_length,
            history_default_limit=self.chat_history_default_limit,
        )

    @cached_property
    def cors(self) -> CorsConfig:
        """CORS configuration."""
        return CorsConfig(allowed_origins=self.cors_allowed_origins)

    @cached_property
    def rate_limit(self) -> RateLimitConfig:
        """Rate limit configuration."""
        return RateLimitConfig(
            enabled=self.rate_limit_enabled,
            default=self.rate_limit_default,
            auth=self.rate_limit_auth,
            chat=self.rate_limit_chat,
        )


# Global settings instance
settings = Settings()

"""JWT authentication configuration."""

from pydantic import BaseModel, SecretStr


class AuthConfig(BaseModel, frozen=True):
    """JWT authentication settings."""

    secret_key: SecretStr
    algorithm: str
    issuer: str
    access_token_expire_minutes: int
    max_login_attempts: int
    login_lockout_seconds: int

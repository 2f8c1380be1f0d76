"""JWT access tokens and Redis-backed failed-login tracking."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
import redis.asyncio as redis

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.schemas.auth_schema import TokenPayload

LOGIN_ATTEMPTS_PREFIX = "login_attempts:"

ACCESS_TOKEN_TYPE = "access"


def decode_access_token(token: str) -> dict:
    """Verify signature, expiry, issuer and token type; return the raw claims.

    Raises:
        TokenExpiredError: the token is past its ``exp``.
        InvalidTokenError: anything else wrong with the token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key.get_secret_value(),
            algorithms=[settings.auth.algorithm],
            issuer=settings.auth.issuer,
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError
    try:
        int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError from e
    return payload


class TokenService:
    """Issue and verify bearer tokens; count failed logins in Redis."""

    def __init__(self, redis_client: redis.Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self._secret = settings.auth.secret_key.get_secret_value()
        self._algorithm = settings.auth.algorithm

    @property
    def expires_in(self) -> int:
        """Token TTL in seconds."""
        return settings.auth.access_token_expire_minutes * 60

    def create_access_token(self, user_id: int, email: str) -> str:
        """Create a signed, time-bounded access token for the user."""
        now = datetime.now(UTC)
        payload = {
            "sub": str(user_id),
            "email": email,
            "type": ACCESS_TOKEN_TYPE,
            "jti": str(uuid.uuid4()),
            "iss": settings.auth.issuer,
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate an access token."""
        payload = decode_access_token(token)
        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email", ""),
            type=payload["type"],
            jti=payload.get("jti", ""),
            iss=payload["iss"],
            exp=payload["exp"],
        )

    # --- Login attempts ---

    async def record_failed_login(self, email: str) -> int:
        """Record a failed login attempt, return total count."""
        key = f"{LOGIN_ATTEMPTS_PREFIX}{email}"
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, settings.auth.login_lockout_seconds)
        return int(count)

    async def reset_login_attempts(self, email: str) -> None:
        """Clear failed login attempts after successful login."""
        await self._redis.delete(f"{LOGIN_ATTEMPTS_PREFIX}{email}")

    async def get_login_attempts(self, email: str) -> int:
        """Get current failed login attempt count."""
        result = await self._redis.get(f"{LOGIN_ATTEMPTS_PREFIX}{email}")
        return int(result) if result else 0

    async def is_locked(self, email: str) -> bool:
        attempts = await self.get_login_attempts(email)
        return attempts >= settings.auth.max_login_attempts

"""Signup and login."""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from app.core.security import DUMMY_HASH, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.auth_schema import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from app.services.token_service import TokenService

logger = structlog.get_logger()


class AuthService:
    """Creates accounts and exchanges credentials for bearer tokens."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenService,
        session: AsyncSession,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._session = session

    async def signup(self, request: SignupRequest) -> AuthResponse:
        """Register a new user and return a token."""
        if await self._user_repo.exists_by_email(request.email):
            raise UserAlreadyExistsError

        hashed = await hash_password(request.password)
        try:
            user = await self._user_repo.create(
                email=request.email,
                hashed_password=hashed,
            )
            await self._session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same email.
            await self._session.rollback()
            raise UserAlreadyExistsError from e

        logger.info("User signed up", email=user.email, user_id=user.id)
        return self._auth_response(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Authenticate a user and return a token."""
        if await self._token_service.is_locked(request.email):
            logger.warning("Login refused, account locked", email=request.email)
            raise AccountLockedError

        user = await self._user_repo.find_by_email(request.email)

        if user is None:
            await verify_password(request.password, DUMMY_HASH)
            await self._token_service.record_failed_login(request.email)
            raise InvalidCredentialsError

        if not await verify_password(request.password, user.hashed_password):
            await self._token_service.record_failed_login(request.email)
            raise InvalidCredentialsError

        await self._token_service.reset_login_attempts(request.email)
        logger.info("User logged in", email=user.email, user_id=user.id)
        return self._auth_response(user)

    async def get_user(self, user_id: int) -> UserResponse:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise AuthenticationError(message="User not found")
        return UserResponse.model_validate(user)

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            token=self._token_service.create_access_token(user.id, user.email),
            expires_in=self._token_service.expires_in,
            user=UserResponse.model_validate(user),
        )

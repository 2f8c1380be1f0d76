"""Global dependencies for the application."""

from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, Request
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_async_session
from app.core.exceptions import AuthenticationError
from app.core.redis import get_redis
from app.core.security import ensure_owner
from app.repositories.chat_repo import ChatRepository
from app.repositories.user_repo import UserRepository
from app.services.auth_service import AuthService
from app.services.chat_service import ChatService
from app.services.completion_service import CompletionService
from app.services.conversation_service import ConversationService
from app.services.token_service import TokenService

# --- Completion model ---


@lru_cache
def get_llm() -> BaseChatModel | None:
    """Chat model for the configured endpoint, or None without an API key."""
    llm_config = settings.llm
    if not llm_config.is_configured:
        return None
    return ChatOpenAI(
        model=llm_config.model,
        api_key=llm_config.api_key,
        base_url=llm_config.api_url,
        temperature=llm_config.temperature,
        max_tokens=llm_config.max_tokens,
        timeout=llm_config.timeout_seconds,
        max_retries=llm_config.max_retries,
        default_headers={
            "HTTP-Referer": llm_config.app_url,
            "X-Title": llm_config.app_title,
        },
    )


def get_completion_service() -> CompletionService:
    return CompletionService(
        llm=get_llm(),
        max_context_turns=settings.llm.max_context_turns,
    )


# --- Auth dependencies ---


class CurrentUser(BaseModel):
    """Authenticated user resolved from the bearer token."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str


def get_token_service() -> TokenService:
    """Get TokenService backed by the active Redis client."""
    return TokenService(get_redis())


def get_user_repository(
    session: AsyncSession = Depends(get_async_session),
) -> UserRepository:
    """Get UserRepository bound to the current session."""
    return UserRepository(session)


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    """Get ChatRepository bound to the current session."""
    return ChatRepository(session)


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_async_session),
) -> AuthService:
    """Get AuthService with all dependencies."""
    return AuthService(
        user_repo=user_repo,
        token_service=token_service,
        session=session,
    )


async def get_current_user(
    request: Request,
    user_repo: UserRepository = Depends(get_user_repository),
) -> CurrentUser:
    """Resolve the user id set by AuthMiddleware to an existing account."""
    state = getattr(request, "state", None)
    user_id = getattr(state, "user_id", None) if state else None
    if user_id is None:
        raise AuthenticationError(message="Access token required")
    user = await user_repo.find_by_id(user_id)
    if user is None:
        raise AuthenticationError(message="User not found")
    return CurrentUser(id=user.id, email=user.email)


def require_ownership(field: str = "user_id") -> Callable[..., CurrentUser]:
    """Dependency factory: a request naming an owner must name the caller.

    The owner id is read from the path or query parameter ``field``; requests
    that do not name one pass through.
    """

    def _check(
        request: Request,
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        owner_id = request.path_params.get(field) or request.query_params.get(field)
        if owner_id is not None:
            ensure_owner(current_user.id, owner_id)
        return current_user

    return _check


# --- Chat dependencies ---


def get_conversation_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    session: AsyncSession = Depends(get_async_session),
    current_user: CurrentUser = Depends(get_current_user),
) -> ConversationService:
    """Get ConversationService for the authenticated user."""
    return ConversationService(
        chat_repo=chat_repo, session=session, user_id=current_user.id
    )


def get_chat_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    session: AsyncSession = Depends(get_async_session),
    completion_service: CompletionService = Depends(get_completion_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> ChatService:
    """Get ChatService for the authenticated user."""
    return ChatService(
        chat_repo=chat_repo,
        completion_service=completion_service,
        session=session,
        user_id=current_user.id,
    )

"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-pytest-only")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("APP_ENV", "development")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OPENROUTER_API_KEY"] = ""

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from langchain_core.language_models import BaseChatModel  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.database import Base  # noqa: E402
from app.models.conversation import Conversation, Turn  # noqa: E402, F401
from app.models.user import User  # noqa: E402
from app.services.completion_service import CompletionService  # noqa: E402
from app.services.token_service import TokenService  # noqa: E402

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(
    fake_redis: fakeredis.aioredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Patch the global redis_client used by get_redis()."""
    monkeypatch.setattr("app.core.redis.redis_client", fake_redis)


@pytest.fixture
def token_service(fake_redis: fakeredis.aioredis.FakeRedis) -> TokenService:
    """Create a TokenService backed by fake Redis."""
    return TokenService(fake_redis)


# --- Users and tokens ---

CreateUser = Callable[[str], Awaitable[User]]


@pytest.fixture
def create_user() -> CreateUser:
    """Factory inserting a user row (password hash is not a real bcrypt hash)."""

    async def _create(email: str = "user@test.com") -> User:
        async with test_session_factory() as session:
            user = User(email=email, hashed_password="not-a-real-hash")
            session.add(user)
            await session.commit()
            return user

    return _create


@pytest.fixture
async def user(create_user: CreateUser) -> User:
    return await create_user("user@test.com")


@pytest.fixture
def auth_headers(
    token_service: TokenService,
) -> Callable[[User], dict[str, str]]:
    """Build Authorization headers carrying a valid token for the user."""

    def _headers(for_user: User) -> dict[str, str]:
        token = token_service.create_access_token(for_user.id, for_user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


# --- Mock completion model ---


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock chat model for testing."""
    mock = MagicMock(spec=BaseChatModel)
    mock.ainvoke = AsyncMock(return_value=AIMessage(content="Test response"))
    return mock


@pytest.fixture
def completion_service(mock_llm: MagicMock) -> CompletionService:
    return CompletionService(llm=mock_llm, max_context_turns=20)


# --- App override & client fixtures ---


@pytest.fixture
def application(completion_service: CompletionService):  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from app.core.database import get_async_session
    from app.dependencies import get_completion_service
    from app.main import app

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_completion_service] = lambda: completion_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(application) -> AsyncGenerator[AsyncClient, None]:  # type: ignore[no-untyped-def]
    """Create an async test client without credentials."""
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def authed_client(
    application,  # type: ignore[no-untyped-def]
    user: User,
    auth_headers: Callable[[User], dict[str, str]],
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client authenticated as ``user``."""
    transport = ASGITransport(app=application)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers(user)
    ) as ac:
        yield ac

"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.auth_router import router as auth_router
from app.api.chat_router import router as chat_router
from app.core.config import settings
from app.core.database import Base, engine
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.core.middleware import AuthMiddleware, SecurityHeadersMiddleware
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.core.redis import close_redis, init_redis
from app.models import conversation, user  # noqa: F401
from app.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        model=settings.llm.model,
        completion_configured=settings.llm.is_configured,
        rate_limiting=settings.rate_limit.enabled,
        cors_origins=settings.cors.allowed_origins_list,
    )
    if not settings.llm.is_configured:
        logger.warning("OPENROUTER_API_KEY is not set, replies will be apologies")
    await init_redis()
    if settings.app.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Customer support chat backed by an LLM completion API",
    version=settings.app.version,
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, unhandled_exception_handler)

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(AuthMiddleware)
app.add_middleware(SlowAPIMiddleware)
if settings.app.is_production:
    app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=ApiResponse[dict])
async def health_check() -> dict:
    """Liveness probe."""
    return success_response(
        {
            "status": "OK",
            "message": "Server is running",
            "environment": settings.app.env,
            "timestamp": datetime.now(UTC).isoformat(),
        }
    )


@app.get("/api/info", response_model=ApiResponse[dict])
async def api_info() -> dict:
    """Describe the API and its enabled features."""
    return success_response(
        {
            "name": settings.app.name,
            "version": settings.app.version,
            "environment": settings.app.env,
            "features": {
                "rate_limit": settings.rate_limit.enabled,
                "authentication": True,
                "ai_chat": settings.llm.is_configured,
            },
        }
    )


# Register routers
app.include_router(auth_router)
app.include_router(chat_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )

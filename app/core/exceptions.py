"""Application exception classes and handlers."""

import traceback
from enum import StrEnum

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.response_schema import ErrorDetail, ErrorResponse

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message=message, code="AUTHENTICATION_ERROR", status_code=401)


class InvalidCredentialsError(AppException):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# --- Rejected token (403) ---


class TokenExpiredError(AppException):
    """Token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired, please login again",
            code="TOKEN_EXPIRED",
            status_code=403,
        )


class InvalidTokenError(AppException):
    """Token is malformed, badly signed or issued by someone else."""

    def __init__(self) -> None:
        super().__init__(
            message="Token is malformed or invalid",
            code="INVALID_TOKEN",
            status_code=403,
        )


# --- Authorization (403) ---


class AuthorizationError(AppException):
    """Caller does not own the named resource."""

    def __init__(self, message: str = "You can only access your own resources") -> None:
        super().__init__(message=message, code="FORBIDDEN", status_code=403)


# --- Not Found (404) ---


class ConversationNotFoundError(AppException):
    """Conversation is missing, deleted, or owned by another user."""

    def __init__(self) -> None:
        super().__init__(
            message="The requested chat does not exist or you do not have access to it",
            code="CHAT_NOT_FOUND",
            status_code=404,
        )


# --- Conflict (409) ---


class UserAlreadyExistsError(AppException):
    """User with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=409,
        )


# --- Rate Limit (429) ---


class AccountLockedError(AppException):
    """Too many failed login attempts."""

    def __init__(self) -> None:
        super().__init__(
            message="Too many failed login attempts. Please try again later.",
            code="ACCOUNT_LOCKED",
            status_code=429,
        )


# --- Completion gateway (never rendered as HTTP) ---


class CompletionErrorKind(StrEnum):
    """Classified failure of the completion API call."""

    UNAUTHORIZED = "unauthorized"
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    NOT_CONFIGURED = "not_configured"


class CompletionError(Exception):
    """Completion API call failed; carries the classified kind."""

    def __init__(
        self,
        kind: CompletionErrorKind,
        status_code: int | None = None,
        detail: str = "",
    ) -> None:
        self.kind = kind
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{kind}: {detail or status_code}")


# --- Exception Handlers ---


def _error_body(
    status: int, message: str, code: str, details: list[ErrorDetail] | None = None
) -> dict:
    return ErrorResponse(
        status=status, message=message, code=code, details=details
    ).model_dump(exclude_none=True)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.message, exc.code),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field details."""
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error["loc"][1:]) or "body",
            message=error["msg"],
        )
        for error in exc.errors()
    ]
    content = _error_body(400, "Validation failed", "VALIDATION_ERROR", details)
    return JSONResponse(status_code=400, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: generic 500, details only outside production."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        method=request.method,
        path=request.url.path,
    )
    if settings.app.is_production:
        content = _error_body(500, "Something went wrong!", "INTERNAL_ERROR")
    else:
        content = _error_body(500, str(exc) or type(exc).__name__, "INTERNAL_ERROR")
        content["stack"] = traceback.format_exception(exc)
    return JSONResponse(status_code=500, content=content)

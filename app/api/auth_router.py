"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.core.config import settings
from app.core.rate_limit import limiter
from app.dependencies import CurrentUser, get_auth_service, get_current_user
from app.schemas.auth_schema import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from app.schemas.response_schema import ApiResponse, success_response
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post(
    "/signup",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.rate_limit.auth)
async def signup(
    request: Request,
    body: SignupRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Create an account and receive a token."""
    result = await auth_service.signup(body)
    return success_response(result, status=201, message="User created successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
@limiter.limit(settings.rate_limit.auth)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Authenticate and receive a token."""
    result = await auth_service.login(body)
    return success_response(result, message="Login successful")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(
    auth_service: AuthServiceDep,
    current_user: CurrentUser = Depends(get_current_user),
) -> dict:
    """Return the authenticated user."""
    user = await auth_service.get_user(current_user.id)
    return success_response(user)

"""
Authentication API routes.

This module provides REST endpoints for:
- User login
- User registration
- Token validation
- Token refresh
"""

import logging

from fastapi import APIRouter, Request, status

from src.api.dependencies import AuthServiceDep, BearerCredentials
from src.core.config import settings
from src.core.rate_limit import limiter
from src.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterResponse,
    TokenRequest,
    TokenValidationResponse,
)
from src.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _pick_token(
    token_request: TokenRequest | None, credentials: BearerCredentials
) -> str | None:
    """Prefer the token in the body, fall back to the Authorization header."""
    if token_request is not None and token_request.token:
        return token_request.token
    return credentials.credentials if credentials else None


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a session token.

    The password may also be sent as `secret` or `senha`.

    **Rate Limit:** Configurable via RATE_LIMIT_LOGIN (default: 5/15minute)

    Returns the token (24h expiry by default) and a summary of the user.
    """,
)
@limiter.limit(settings.rate_limit_login)
async def login(
    request: Request,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """
    Login and receive a session token.

    Raises:
        401: Invalid credentials or inactive account
    """
    return await auth_service.login(credentials.email, credentials.password)


@router.post(
    "/registro",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Register a new user account. New users always get the `user` role.

    **Password Requirements:** at least PASSWORD_MIN_LENGTH characters (default 6)

    **Rate Limit:** Configurable via RATE_LIMIT_REGISTER (default: 3/hour)
    """,
)
@limiter.limit(settings.rate_limit_register)
async def register(
    request: Request,
    user_data: UserCreate,
    auth_service: AuthServiceDep,
) -> RegisterResponse:
    """
    Register a new user.

    Raises:
        400: Email already in use
        422: Invalid name, email or password
    """
    user = await auth_service.register(user_data)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/validar-token",
    response_model=TokenValidationResponse,
    summary="Validate a session token",
    description="""
    Check whether a token is valid. Never fails: invalid, expired and
    malformed tokens all yield `{"valid": false}`.
    """,
)
async def validate_token(
    auth_service: AuthServiceDep,
    credentials: BearerCredentials,
    token_request: TokenRequest | None = None,
) -> TokenValidationResponse:
    return await auth_service.validate(_pick_token(token_request, credentials))


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh a session token",
    description="""
    Issue a new token with a fresh expiration for the user of a valid token.
    The old token stays valid until it expires.
    """,
)
async def refresh(
    auth_service: AuthServiceDep,
    credentials: BearerCredentials,
    token_request: TokenRequest | None = None,
) -> RefreshResponse:
    """
    Refresh a session token.

    Raises:
        401: Invalid or expired token, or inactive user
    """
    return await auth_service.refresh(_pick_token(token_request, credentials))

"""
FastAPI dependencies for authentication and authorization.

This module provides:
- Current user extraction from the session token
- Active user verification
- Admin role checking
- Service factories bound to the request's database session
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.exceptions import (
    AuthenticationError,
    InactiveUserError,
    InsufficientPermissionsError,
    InvalidTokenError,
)
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.services import (
    AccountService,
    AuthService,
    CardService,
    TokenService,
    TransactionService,
    UserService,
)

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI - this adds the padlock icon
security = HTTPBearer(
    scheme_name="Bearer",
    description="Enter your session token",
    auto_error=False,
)


def get_token_service(request: Request) -> TokenService:
    """Return the token service built at startup."""
    return request.app.state.token_service


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> User:
    """
    Dependency to extract and validate current user from the session token.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Checks signature and expiration
    3. Reads the numeric user id and email subject claims
    4. Retrieves user from database and checks the subject still matches

    Args:
        credentials: HTTP Bearer credentials from security scheme
        db: Database session
        token_service: Token service from app state

    Returns:
        User instance of authenticated user

    Raises:
        AuthenticationError (401): If the Bearer token is missing
        InvalidTokenError (401): If the token is invalid, or its user is
            missing or has changed email since the token was issued
    """
    if not credentials:
        logger.warning("Authentication failed: missing Bearer token")
        raise AuthenticationError(
            "Missing authentication credentials", error_code="MISSING_CREDENTIALS"
        )

    token = credentials.credentials

    if not token_service.is_valid(token):
        logger.warning("Authentication failed: invalid or expired token")
        raise InvalidTokenError()

    try:
        user_id = token_service.extract_user_id(token)
        subject = token_service.extract_subject(token)
    except InvalidTokenError:
        logger.warning("Authentication failed: invalid token payload")
        raise

    user = await UserRepository(db).get_by_id(user_id)
    if not user or user.email != subject:
        logger.warning(f"Authentication failed: no user matches token - {user_id}")
        raise InvalidTokenError()

    return user


async def require_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency to ensure user is active (not deactivated).

    Raises:
        InactiveUserError (403): If user account is inactive
    """
    if not current_user.is_active:
        logger.warning(f"Access denied: inactive user {current_user.id}")
        raise InactiveUserError()

    return current_user


async def require_admin(
    current_user: User = Depends(require_active_user),
) -> User:
    """
    Dependency to ensure user has the admin role.

    Raises:
        InsufficientPermissionsError (403): If user is not an admin
    """
    if not current_user.is_admin:
        logger.warning(
            f"Access denied: user {current_user.id} attempted admin-only action"
        )
        raise InsufficientPermissionsError()

    return current_user


# ============================================================================
# Service Dependencies
# ============================================================================


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    """
    Dependency to get AuthService instance.

    Usage:
        @router.post("/login")
        async def login(auth_service: AuthServiceDep):
            return await auth_service.login(...)
    """
    return AuthService(db, token_service)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Dependency to get UserService instance."""
    return UserService(db)


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    """Dependency to get AccountService instance."""
    return AccountService(db)


def get_card_service(db: AsyncSession = Depends(get_db)) -> CardService:
    """Dependency to get CardService instance."""
    return CardService(db)


def get_transaction_service(db: AsyncSession = Depends(get_db)) -> TransactionService:
    """Dependency to get TransactionService instance."""
    return TransactionService(db)


# Convenience type aliases for common dependencies
CurrentUser = Annotated[User, Depends(require_active_user)]
AdminUser = Annotated[User, Depends(require_admin)]
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
CardServiceDep = Annotated[CardService, Depends(get_card_service)]
TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]

"""
Authentication service for registration, login and session tokens.

This module provides:
- AuthLookupService: resolves the user behind a login or a token
- AuthService: registration, login, token validation and token refresh

Tokens are stateless: refreshing issues a new token with a fresh
expiration and leaves the previous one valid until it expires. Logging
out is a client-side operation.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.security import hash_password, verify_password
from src.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from src.models.enums import UserRole
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.schemas.auth import (
    LoginResponse,
    RefreshResponse,
    TokenValidationResponse,
    UserSummary,
)
from src.schemas.user import UserCreate
from src.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AuthLookupService:
    """
    Resolve users for authentication.

    Missing and inactive users are treated the same way: neither can
    authenticate.
    """

    def __init__(self, session: AsyncSession):
        self.user_repo = UserRepository(session)

    async def find_user_by_email(self, email: str) -> User | None:
        """Return the user with this email, active or not."""
        return await self.user_repo.get_by_email(email)

    async def load_active_user(self, email: str) -> User:
        """
        Load the active user with this email.

        Args:
            email: Email address (token subject or login name)

        Returns:
            Active User instance

        Raises:
            InvalidCredentialsError: If no user has this email or the user
                is inactive
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            raise InvalidCredentialsError()
        return user


class AuthService:
    """
    Service class for authentication operations.

    This service handles:
    - User registration
    - Login and token issuance
    - Token validation
    - Token refresh

    All methods require an active database session.
    """

    def __init__(self, session: AsyncSession, token_service: TokenService):
        """
        Initialize AuthService.

        Args:
            session: Async database session
            token_service: Signs and validates session tokens
        """
        self.session = session
        self.token_service = token_service
        self.user_repo = UserRepository(session)
        self.lookup = AuthLookupService(session)

    async def register(self, user_data: UserCreate) -> User:
        """
        Register a new user.

        The password is hashed before it is stored, the role is always
        "user" and the account starts active.

        Args:
            user_data: Registration data (name, email, password)

        Returns:
            Created User instance

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        email = user_data.email.lower()

        if await self.user_repo.email_exists(email):
            logger.warning(f"Registration rejected: email already in use ({email})")
            raise DuplicateEmailError()

        user = User(
            name=user_data.name,
            email=email,
            password_hash=hash_password(user_data.password),
            role=UserRole.user,
            is_active=True,
        )
        user = await self.user_repo.add(user)
        await self.session.commit()

        logger.info(f"User registered successfully: {user.id} ({user.email})")
        return user

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Authenticate a user and issue a session token.

        Steps:
        1. Look up the user by email
        2. Verify the password against the stored Argon2 hash
        3. Refuse inactive users
        4. Issue a token carrying email, id and role

        Wrong email, wrong password and inactive user all raise the same
        error so callers cannot tell which one happened.

        Args:
            email: Login email
            password: Plaintext password

        Returns:
            LoginResponse with token, user summary and ttl in seconds

        Raises:
            InvalidCredentialsError: If the credentials do not match an
                active user
        """
        user = await self.lookup.find_user_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login failed: invalid credentials")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login failed: user {user.id} is inactive")
            raise InvalidCredentialsError()

        token = self.token_service.issue(user.email, user.id, user.role)

        logger.info(f"User logged in successfully: {user.id}")
        return LoginResponse(
            token=token,
            user=UserSummary.model_validate(user),
            expires_in=self.token_service.ttl_seconds,
        )

    async def _resolve(self, token: str | None) -> User | None:
        if not token or not self.token_service.is_valid(token):
            return None
        try:
            subject = self.token_service.extract_subject(token)
            user_id = self.token_service.extract_user_id(token)
            user = await self.lookup.load_active_user(subject)
        except (InvalidTokenError, InvalidCredentialsError):
            return None
        # Subject and id must still name the same user after an email change
        if user.id != user_id:
            return None
        return user

    async def validate(self, token: str | None) -> TokenValidationResponse:
        """
        Validate a token and describe its user.

        A token is valid when its signature and expiration check out and
        its subject still resolves to an active user.

        Args:
            token: Encoded session token

        Returns:
            TokenValidationResponse; user and remaining_time are only set
            when valid is True
        """
        user = await self._resolve(token)
        if user is None:
            return TokenValidationResponse(valid=False)

        return TokenValidationResponse(
            valid=True,
            user=UserSummary.model_validate(user),
            remaining_time=self.token_service.extract_remaining_millis(token),
        )

    async def refresh(self, token: str | None) -> RefreshResponse:
        """
        Issue a new token for the user of a still-valid token.

        The new token carries the user's current claims and a fresh
        expiration. The old token is not invalidated.

        Args:
            token: Encoded session token

        Returns:
            RefreshResponse with the new token and its ttl

        Raises:
            InvalidTokenError: If the token is invalid or its user is
                missing or inactive
        """
        user = await self._resolve(token)
        if user is None:
            logger.warning("Token refresh rejected")
            raise InvalidTokenError()

        new_token = self.token_service.issue(user.email, user.id, user.role)

        logger.info(f"Token refreshed for user {user.id}")
        return RefreshResponse(token=new_token, expires_in=self.token_service.ttl_seconds)

"""
Session token service.

This module provides:
- TokenConfig: immutable signing configuration, built once at startup
- TokenService: issues and validates HS256-signed JWT session tokens

Token claims:
    sub     email of the user
    userId  numeric user id
    role    user role ("admin" or "user")
    iat     issued-at (seconds since epoch)
    exp     expiration (iat + ttl)
    jti     random token id, so two tokens issued in the same second differ

There is no revocation list: a token is valid exactly while its signature
checks out and its expiration lies in the future.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.exceptions import InvalidTokenError
from src.models.enums import UserRole

logger = logging.getLogger(__name__)

CLAIM_USER_ID = "userId"
CLAIM_ROLE = "role"


@dataclass(frozen=True)
class TokenConfig:
    """
    Signing configuration for session tokens.

    Attributes:
        secret: Symmetric HMAC key material
        ttl_seconds: Lifetime of an issued token (default 24 hours)
        algorithm: JWS algorithm, HS256
    """

    secret: str
    ttl_seconds: int = 86400
    algorithm: str = "HS256"


class TokenService:
    """
    Issue and validate session tokens.

    Validation fails closed: expired, malformed and badly signed tokens all
    produce the same "invalid" answer, so callers cannot tell them apart.

    Usage:
        service = TokenService(TokenConfig(secret=settings.secret_key))
        token = service.issue("a@x.com", 1, UserRole.user)
        if service.is_valid(token):
            user_id = service.extract_user_id(token)
    """

    def __init__(self, config: TokenConfig):
        self.config = config

    @property
    def ttl_seconds(self) -> int:
        return self.config.ttl_seconds

    def issue(
        self,
        email: str,
        user_id: int,
        role: UserRole | str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed token for a user.

        Args:
            email: Subject of the token
            user_id: Numeric id of the user
            role: Role of the user
            expires_delta: Optional lifetime overriding the configured ttl

        Returns:
            Encoded JWT string
        """
        now = datetime.now(UTC)
        lifetime = expires_delta if expires_delta is not None else timedelta(
            seconds=self.config.ttl_seconds
        )
        claims = {
            "sub": email,
            CLAIM_USER_ID: user_id,
            CLAIM_ROLE: role.value if isinstance(role, UserRole) else role,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(claims, self.config.secret, algorithm=self.config.algorithm)

    def _decode(self, token: str) -> dict[str, Any]:
        return jwt.decode(
            token,
            self.config.secret,
            algorithms=[self.config.algorithm],
            options={"require_exp": True, "require_sub": True},
        )

    def is_valid(self, token: str | None) -> bool:
        """
        Check signature, structure and expiration of a token.

        Never raises; any failure yields False.

        Args:
            token: Encoded JWT string

        Returns:
            True only for a well-formed, correctly signed, unexpired token
        """
        if not token:
            return False
        try:
            claims = self._decode(token)
        except (JWTError, ValueError, TypeError) as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            return False
        return isinstance(claims.get(CLAIM_USER_ID), int)

    def _claims(self, token: str) -> dict[str, Any]:
        try:
            return self._decode(token)
        except (JWTError, ValueError, TypeError) as e:
            raise InvalidTokenError() from e

    def extract_subject(self, token: str) -> str:
        """
        Read the email (subject) of a token.

        Raises:
            InvalidTokenError: If the token does not validate
        """
        return self._claims(token)["sub"]

    def extract_user_id(self, token: str) -> int:
        """
        Read the numeric user id of a token.

        Raises:
            InvalidTokenError: If the token does not validate
        """
        user_id = self._claims(token).get(CLAIM_USER_ID)
        if not isinstance(user_id, int):
            raise InvalidTokenError()
        return user_id

    def extract_role(self, token: str) -> UserRole:
        """
        Read the role of a token.

        Raises:
            InvalidTokenError: If the token does not validate or carries an
                unknown role
        """
        try:
            return UserRole(self._claims(token).get(CLAIM_ROLE))
        except ValueError as e:
            raise InvalidTokenError() from e

    def extract_remaining_millis(self, token: str) -> int:
        """
        Milliseconds until the token expires.

        Raises:
            InvalidTokenError: If the token does not validate
        """
        expires_at = self._claims(token)["exp"]
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
        return max(int(expires_at) * 1000 - now_ms, 0)

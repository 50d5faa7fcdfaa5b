"""
Password security utilities.

This module provides:
- Password hashing with Argon2id (the password-hashing collaborator)
- Password verification that fails closed on malformed hashes
- Minimum password length validation

Session tokens are handled by src.services.token_service.
"""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import (
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from src.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing with Argon2id
# =============================================================================

pwd_hasher = PasswordHasher(
    time_cost=settings.argon2_time_cost,
    memory_cost=settings.argon2_memory_cost,
    parallelism=settings.argon2_parallelism,
    hash_len=32,
    salt_len=16,
)


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password to hash

    Returns:
        Argon2id hash string (includes algorithm, parameters, salt, and hash)

    Example:
        >>> hashed = hash_password("abcdef")
        >>> # Returns: $argon2id$v=19$m=65536,t=2,p=4$...
    """
    return pwd_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against an Argon2id hash.

    Args:
        password: Plain text password to verify
        hashed_password: Argon2id hash to verify against

    Returns:
        True if password matches hash, False otherwise (including when the
        stored hash is not a valid Argon2 hash)
    """
    try:
        pwd_hasher.verify(hashed_password, password)
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def validate_password_strength(password: str | None) -> tuple[bool, str | None]:
    """
    Validate a plaintext password against the minimum length rule.

    Args:
        password: Password to validate

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, error_message) if invalid

    Example:
        >>> validate_password_strength("abc")
        (False, "Password must be at least 6 characters long")
        >>> validate_password_strength("abcdef")
        (True, None)
    """
    minimum = settings.password_min_length
    if password is None or len(password) < minimum:
        return False, f"Password must be at least {minimum} characters long"

    return True, None

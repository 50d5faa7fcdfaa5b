"""
Authentication Pydantic schemas for API request/response handling.

This module provides:
- Login request and response schemas
- Registration response schema
- Token validation and refresh schemas
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from src.models.enums import UserRole
from src.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """
    Schema for user login request.

    Attributes:
        email: User's email address
        password: User's password (also accepted as "secret" or "senha")
    """

    email: EmailStr = Field(description="User's email address")
    password: str = Field(
        min_length=1,
        validation_alias=AliasChoices("password", "secret", "senha"),
        description="User's password",
    )


class UserSummary(BaseModel):
    """
    Public identity of the authenticated user.

    Attributes:
        id: User id
        name: Display name
        email: Email address
        role: Access role
    """

    id: int
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """
    Schema for a successful login.

    Attributes:
        token: Signed session token
        token_type: Always "bearer"
        user: Summary of the authenticated user
        expires_in: Token lifetime in seconds (86400 = 24 hours)
    """

    token: str = Field(description="Signed session token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserSummary
    expires_in: int = Field(description="Token lifetime in seconds")


class RegisterResponse(BaseModel):
    """
    Schema returned after registration.

    Attributes:
        message: Confirmation message
        user: The created user
    """

    message: str = Field(default="User registered successfully")
    user: UserResponse


class TokenRequest(BaseModel):
    """
    Schema carrying a session token in the request body.

    When token is omitted the bearer token from the Authorization header
    is used instead.
    """

    token: str | None = Field(default=None, description="Session token")


class TokenValidationResponse(BaseModel):
    """
    Result of a token validation.

    Attributes:
        valid: Whether the token is valid and its user is active
        user: Summary of the token's user (only when valid)
        remaining_time: Milliseconds until expiration (only when valid)
    """

    valid: bool
    user: UserSummary | None = None
    remaining_time: int | None = Field(
        default=None, description="Milliseconds until the token expires"
    )


class RefreshResponse(BaseModel):
    """
    Schema for a refreshed token.

    Attributes:
        token: Newly issued token (the old one stays valid until it expires)
        token_type: Always "bearer"
        expires_in: Token lifetime in seconds
    """

    token: str
    token_type: str = Field(default="bearer")
    expires_in: int

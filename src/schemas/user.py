"""
User Pydantic schemas for API request/response handling.

This module provides:
- User creation and update schemas
- User response schema
- Password change, status and role change schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.core.security import validate_password_strength
from src.models.enums import UserRole

EMAIL_MAX_LENGTH = 150


def _check_password(value: str) -> str:
    is_valid, error_message = validate_password_strength(value)
    if not is_valid:
        raise ValueError(error_message)
    return value


def _check_email_length(value: str | None) -> str | None:
    if value is not None and len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must have at most {EMAIL_MAX_LENGTH} characters")
    return value


class UserCreate(BaseModel):
    """
    Schema for user registration.

    The role is not accepted here: registered users always start as
    regular users and only an admin can promote them.

    Attributes:
        name: Display name (2-100 characters)
        email: User's email address (max 150 characters)
        password: User's password (min length from settings)
    """

    name: str = Field(min_length=2, max_length=100, description="Display name")
    email: EmailStr = Field(description="User's email address")
    password: str = Field(description="User's password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Trim the name and reject names that are too short once trimmed."""
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must have at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, value: str) -> str:
        return _check_email_length(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        """Validate password length."""
        return _check_password(value)


class UserUpdate(BaseModel):
    """
    Schema for updating the current user's profile.

    All fields are optional. An empty or missing password leaves the
    stored password untouched.

    Attributes:
        name: New display name
        email: New email address
        password: New password
    """

    name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = Field(default=None)
    password: str | None = Field(default=None)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, value: str | None) -> str | None:
        return _check_email_length(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        """Validate the new password if one was given."""
        if not value:
            return None
        return _check_password(value)


class UserPasswordChange(BaseModel):
    """
    Schema for changing user password.

    Attributes:
        current_password: User's current password (for verification)
        new_password: New password
    """

    current_password: str = Field(description="Current password for verification")
    new_password: str = Field(description="New password")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        """Validate new password length."""
        return _check_password(value)


class UserStatusUpdate(BaseModel):
    """Schema for activating or deactivating a user."""

    is_active: bool


class UserRoleUpdate(BaseModel):
    """Schema for changing a user's role."""

    role: UserRole


class UserResponse(BaseModel):
    """
    Schema for user response.

    Attributes:
        id: User id
        name: Display name
        email: Email address
        role: Access role
        is_active: Whether the user can log in
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmailAvailabilityResponse(BaseModel):
    """Whether an email address is already registered."""

    email: str
    exists: bool

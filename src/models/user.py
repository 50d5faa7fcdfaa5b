"""
User model.

This module defines:
- User: Identity, credentials and role of a person using the API

Ownership:
- Accounts, cards and transactions reference their owner through user_id
  with ON DELETE CASCADE at the storage layer.
- The service layer never hard-deletes users: "deleting" a user sets
  is_active to False, and is refused while the user still owns records.
"""

from sqlalchemy import Boolean, Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.enums import UserRole
from src.models.mixins import TimestampMixin


# =============================================================================
# User Model
# =============================================================================


class User(Base, TimestampMixin):
    """
    User model for authentication and profile management.

    Attributes:
        id: Integer primary key (embedded in session tokens as userId)
        name: Display name (2-100 characters)
        email: Unique email address, used as the login and token subject
        password_hash: Argon2id hashed password
        role: Access role (admin or user)
        is_active: False once the user has been deactivated
        created_at: When the user was created
        updated_at: When the user was last updated

    Security:
        - password_hash stores Argon2id hash (never store plain passwords)
        - inactive users cannot log in, validate or refresh tokens
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", create_constraint=True),
        nullable=False,
        default=UserRole.user,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )

    @property
    def is_admin(self) -> bool:
        """True when the user holds the admin role."""
        return self.role == UserRole.admin

    def __repr__(self) -> str:
        """String representation of the User."""
        return f"User(id={self.id}, email={self.email!r}, role={self.role.value})"

"""
User management service.

This module provides:
- Profile retrieval and update (email uniqueness, optional password change)
- Password change with current-password verification
- Activation, deactivation and role changes
- Admin queries (active users, by role, by name, counts)

Users are never hard-deleted: deactivation sets is_active to False and is
refused while the user still owns accounts, cards or transactions.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.security import hash_password, validate_password_strength, verify_password
from src.exceptions import (
    DuplicateEmailError,
    HasDependentsError,
    IncorrectPasswordError,
    NotFoundError,
    WeakPasswordError,
)
from src.models.enums import UserRole
from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Service class for user management operations.

    All methods require an active database session. Mutating methods
    commit their own unit of work.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize UserService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)

    @staticmethod
    def validate_password(password: str | None) -> None:
        """
        Enforce the minimum password length.

        Raises:
            WeakPasswordError: If the password is missing or too short
        """
        is_valid, error_message = validate_password_strength(password)
        if not is_valid:
            raise WeakPasswordError(error_message)

    async def get_user(self, user_id: int) -> User:
        """
        Get a user by id.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    async def update_user(self, user: User, data: UserUpdate) -> User:
        """
        Update a user's profile.

        Steps:
        1. If the email changes, it must not belong to another user
        2. Apply name and email
        3. Re-hash the password only when a non-empty one was sent

        Args:
            user: User to update
            data: Fields to change

        Returns:
            Updated User instance

        Raises:
            DuplicateEmailError: If the new email is used by another user
            WeakPasswordError: If the new password is too short
        """
        if data.email is not None:
            email = data.email.lower()
            if email != user.email and await self.user_repo.email_exists(
                email, exclude_id=user.id
            ):
                logger.warning(f"User {user.id} update rejected: email already in use")
                raise DuplicateEmailError()
            user.email = email

        if data.name is not None:
            user.name = data.name.strip()

        if data.password:
            self.validate_password(data.password)
            user.password_hash = hash_password(data.password)

        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"User {user.id} updated")
        return user

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        """
        Change a user's password.

        Args:
            user: User changing their password
            current_password: Must match the stored hash
            new_password: Replacement password

        Raises:
            IncorrectPasswordError: If current_password does not match
            WeakPasswordError: If new_password is too short
        """
        if not verify_password(current_password, user.password_hash):
            logger.warning(f"Password change rejected for user {user.id}")
            raise IncorrectPasswordError()

        self.validate_password(new_password)
        user.password_hash = hash_password(new_password)

        await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"Password changed for user {user.id}")

    async def set_status(self, user_id: int, is_active: bool) -> User:
        """
        Activate or deactivate a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.get_user(user_id)
        user.is_active = is_active

        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"User {user.id} is_active set to {is_active}")
        return user

    async def set_role(self, user_id: int, role: UserRole) -> User:
        """
        Change a user's role.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.get_user(user_id)
        user.role = role

        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"User {user.id} role set to {role.value}")
        return user

    async def deactivate(self, user: User) -> User:
        """
        Soft-delete a user by marking them inactive.

        Raises:
            HasDependentsError: If the user owns accounts, cards or
                transactions
        """
        if await self.user_repo.has_dependents(user.id):
            logger.warning(f"Deactivation of user {user.id} blocked by owned records")
            raise HasDependentsError(
                "User cannot be deleted while they own accounts, cards or transactions"
            )

        user.is_active = False
        user = await self.user_repo.update(user)
        await self.session.commit()

        logger.info(f"User {user.id} deactivated")
        return user

    async def list_active(self) -> list[User]:
        return await self.user_repo.list_active()

    async def list_by_role(self, role: UserRole) -> list[User]:
        return await self.user_repo.list_by_role(role)

    async def search_by_name(self, term: str) -> list[User]:
        return await self.user_repo.search_by_name(term)

    async def count_active(self) -> int:
        return await self.user_repo.count_active()

    async def email_exists(self, email: str) -> bool:
        return await self.user_repo.email_exists(email)

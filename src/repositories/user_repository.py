"""
User repository for database operations.

This module provides the UserRepository class for managing user data access.
"""

from sqlalchemy import exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.account import Account
from src.models.card import Card
from src.models.enums import UserRole
from src.models.transaction import Transaction
from src.models.user import User
from src.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Repository for user database operations.

    Email lookups are case-insensitive; emails are stored lowercased by
    the service layer.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize user repository.

        Args:
            session: Async database session for executing queries
        """
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get a user by email address.

        Args:
            email: Email address to look up

        Returns:
            User or None if no user has this email
        """
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_id: int | None = None) -> bool:
        """
        Check whether an email is already registered.

        Args:
            email: Email address to check
            exclude_id: User to ignore (the one being updated)

        Returns:
            True if another user uses the email
        """
        query = select(User.id).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_active(self) -> list[User]:
        """List active users ordered by name."""
        result = await self.session.execute(
            select(User).where(User.is_active.is_(True)).order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def list_by_role(self, role: UserRole) -> list[User]:
        """List users holding a role, ordered by name."""
        result = await self.session.execute(
            select(User).where(User.role == role).order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def search_by_name(self, term: str) -> list[User]:
        """Case-insensitive substring search on user names."""
        result = await self.session.execute(
            select(User)
            .where(User.name.icontains(term, autoescape=True))
            .order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def count_active(self) -> int:
        """Count active users."""
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.is_active.is_(True))
        )
        return result.scalar_one()

    async def has_dependents(self, user_id: int) -> bool:
        """
        Check whether the user owns any accounts, cards or transactions.

        Args:
            user_id: ID of the user

        Returns:
            True if at least one owned record exists
        """
        query = select(
            or_(
                exists().where(Account.user_id == user_id),
                exists().where(Card.user_id == user_id),
                exists().where(Transaction.user_id == user_id),
            )
        )
        result = await self.session.execute(query)
        return bool(result.scalar())

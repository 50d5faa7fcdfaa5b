"""
Account repository for database operations.

This module provides the AccountRepository class for managing account data access.
All queries are scoped to a single owner.
"""

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.account import Account
from src.models.enums import AccountType
from src.models.transaction import Transaction
from src.repositories.base import OwnedRepository


class AccountRepository(OwnedRepository[Account]):
    """
    Repository for account database operations.

    Lists are ordered by name. Balances are computed from the eagerly
    loaded transactions collection (see Account.current_balance).
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize account repository.

        Args:
            session: Async database session for executing queries
        """
        super().__init__(Account, session)

    async def get_by_type(self, owner_id: int, account_type: AccountType) -> list[Account]:
        """Get the owner's accounts of one type."""
        query = self._owned(owner_id).where(Account.account_type == account_type)
        return await self._list(query)

    async def get_by_institution(self, owner_id: int, institution: str) -> list[Account]:
        """Case-insensitive substring match on the institution name."""
        query = self._owned(owner_id).where(
            Account.institution.icontains(institution, autoescape=True)
        )
        return await self._list(query)

    async def get_active(self, owner_id: int) -> list[Account]:
        """
        Get the owner's accounts that have at least one transaction.

        Args:
            owner_id: ID of the owning user

        Returns:
            Accounts with transactions, each listed once
        """
        query = self._owned(owner_id).where(
            exists().where(Transaction.account_id == Account.id)
        )
        return await self._list(query)

    async def get_without_transactions(self, owner_id: int) -> list[Account]:
        """Get the owner's accounts with no transactions at all."""
        query = self._owned(owner_id).where(
            ~exists().where(Transaction.account_id == Account.id)
        )
        return await self._list(query)

    async def has_transactions(self, account_id: int) -> bool:
        """Check whether any transaction is booked on the account."""
        result = await self.session.execute(
            select(exists().where(Transaction.account_id == account_id))
        )
        return bool(result.scalar())

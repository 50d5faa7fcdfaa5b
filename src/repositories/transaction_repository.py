"""
Transaction repository for database operations.

This module provides database operations for Transaction model, including:
- Owner-scoped CRUD operations (inherited from OwnedRepository)
- Filtered, paginated search
- Totals and counts by transaction type and period

Every list is ordered by transaction date descending, then id descending.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import TransactionType
from src.models.transaction import Transaction
from src.repositories.base import OwnedRepository


class TransactionRepository(OwnedRepository[Transaction]):
    """
    Repository for Transaction model database operations.

    Name lookups and searches run against the description column.

    Usage:
        transaction_repo = TransactionRepository(session)
        transactions = await transaction_repo.get_by_account(owner_id, account_id)
    """

    name_column = "description"

    def __init__(self, session: AsyncSession):
        """
        Initialize Transaction repository.

        Args:
            session: Async database session
        """
        super().__init__(Transaction, session)

    def _default_order(self) -> tuple[Any, ...]:
        return (Transaction.transaction_date.desc(), Transaction.id.desc())

    @staticmethod
    def _period_filters(
        date_from: date | None,
        date_to: date | None,
    ) -> list[Any]:
        filters = []
        if date_from is not None:
            filters.append(Transaction.transaction_date >= date_from)
        if date_to is not None:
            filters.append(Transaction.transaction_date <= date_to)
        return filters

    def _filtered(
        self,
        owner_id: int,
        transaction_type: TransactionType | None = None,
        account_id: int | None = None,
        card_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        description: str | None = None,
        is_recurring: bool | None = None,
    ) -> Select[Any]:
        filters = self._period_filters(date_from, date_to)

        if transaction_type is not None:
            filters.append(Transaction.transaction_type == transaction_type)
        if account_id is not None:
            filters.append(Transaction.account_id == account_id)
        if card_id is not None:
            filters.append(Transaction.card_id == card_id)
        if description:
            filters.append(
                Transaction.description.icontains(description, autoescape=True)
            )
        if is_recurring is not None:
            filters.append(Transaction.is_recurring == is_recurring)

        query = self._owned(owner_id)
        if filters:
            query = query.where(and_(*filters))
        return query

    async def search(
        self,
        owner_id: int,
        transaction_type: TransactionType | None = None,
        account_id: int | None = None,
        card_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        description: str | None = None,
        is_recurring: bool | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Transaction], int]:
        """
        Search the owner's transactions with optional filters.

        Args:
            owner_id: ID of the owning user
            transaction_type: Only income or only expense
            account_id: Only transactions booked on this account
            card_id: Only transactions charged to this card
            date_from: Transactions on or after this date
            date_to: Transactions on or before this date
            description: Case-insensitive substring of the description
            is_recurring: Only recurring (True) or one-off (False)
            offset: Number of records to skip (pagination)
            limit: Maximum number of records to return

        Returns:
            Tuple of (transactions, total_count)

        Example:
            transactions, total = await repo.search(
                owner_id=user.id,
                transaction_type=TransactionType.expense,
                date_from=date(2024, 1, 1),
                date_to=date(2024, 1, 31),
                offset=0,
                limit=20,
            )
        """
        query = self._filtered(
            owner_id,
            transaction_type=transaction_type,
            account_id=account_id,
            card_id=card_id,
            date_from=date_from,
            date_to=date_to,
            description=description,
            is_recurring=is_recurring,
        )
        total = await self._count(query)
        items = await self._list(query, offset=offset, limit=limit)
        return items, total

    async def get_by_account(self, owner_id: int, account_id: int) -> list[Transaction]:
        """Get the owner's transactions booked on one account."""
        return await self._list(self._filtered(owner_id, account_id=account_id))

    async def get_by_card(self, owner_id: int, card_id: int) -> list[Transaction]:
        """Get the owner's transactions charged to one card."""
        return await self._list(self._filtered(owner_id, card_id=card_id))

    async def get_by_type(
        self, owner_id: int, transaction_type: TransactionType
    ) -> list[Transaction]:
        """Get the owner's transactions of one type."""
        return await self._list(
            self._filtered(owner_id, transaction_type=transaction_type)
        )

    async def get_by_period(
        self, owner_id: int, date_from: date, date_to: date
    ) -> list[Transaction]:
        """Get the owner's transactions dated within [date_from, date_to]."""
        return await self._list(
            self._filtered(owner_id, date_from=date_from, date_to=date_to)
        )

    async def get_recurring(self, owner_id: int) -> list[Transaction]:
        """Get the owner's recurring transactions."""
        return await self._list(self._filtered(owner_id, is_recurring=True))

    async def get_latest(self, owner_id: int, limit: int = 10) -> list[Transaction]:
        """Get the owner's most recent transactions."""
        return await self._list(self._owned(owner_id), limit=limit)

    async def sum_by_type(
        self,
        owner_id: int,
        transaction_type: TransactionType,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Decimal:
        """
        Sum the amounts of the owner's transactions of one type.

        Args:
            owner_id: ID of the owning user
            transaction_type: income or expense
            date_from: Optional start of the period (inclusive)
            date_to: Optional end of the period (inclusive)

        Returns:
            Total amount, Decimal("0.00") when nothing matches
        """
        filters = [
            Transaction.user_id == owner_id,
            Transaction.transaction_type == transaction_type,
            *self._period_filters(date_from, date_to),
        ]
        result = await self.session.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0)).where(and_(*filters))
        )
        return Decimal(str(result.scalar_one())).quantize(Decimal("0.01"))

    async def count_by_type(self, owner_id: int, transaction_type: TransactionType) -> int:
        """Count the owner's transactions of one type."""
        return await self._count(
            self._filtered(owner_id, transaction_type=transaction_type)
        )

    async def count_recurring(self, owner_id: int) -> int:
        """Count the owner's recurring transactions."""
        return await self._count(self._filtered(owner_id, is_recurring=True))

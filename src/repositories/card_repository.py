"""
Card repository for database operations.

This module provides the CardRepository class for managing card data access.
All queries are scoped to a single owner.
"""

from decimal import Decimal

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.card import Card
from src.models.transaction import Transaction
from src.repositories.base import OwnedRepository


class CardRepository(OwnedRepository[Card]):
    """
    Repository for card database operations.

    Lists are ordered by name.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize card repository.

        Args:
            session: Async database session for executing queries
        """
        super().__init__(Card, session)

    async def get_by_brand(self, owner_id: int, brand: str) -> list[Card]:
        """Case-insensitive substring match on the card brand."""
        query = self._owned(owner_id).where(Card.brand.icontains(brand, autoescape=True))
        return await self._list(query)

    async def get_by_closing_day(self, owner_id: int, day: int) -> list[Card]:
        """Get the owner's cards whose statement closes on this day."""
        query = self._owned(owner_id).where(Card.closing_day == day)
        return await self._list(query)

    async def get_by_due_day(self, owner_id: int, day: int) -> list[Card]:
        """Get the owner's cards whose statement is due on this day."""
        query = self._owned(owner_id).where(Card.due_day == day)
        return await self._list(query)

    async def get_with_limit_above(self, owner_id: int, amount: Decimal) -> list[Card]:
        """Get the owner's cards with a credit limit strictly above amount."""
        query = self._owned(owner_id).where(Card.credit_limit > amount)
        return await self._list(query)

    async def sum_credit_limit(self, owner_id: int) -> Decimal:
        """
        Sum the credit limits of the owner's cards.

        Returns:
            Total limit, Decimal("0.00") when the owner has no cards
        """
        result = await self.session.execute(
            select(func.coalesce(func.sum(Card.credit_limit), 0)).where(
                Card.user_id == owner_id
            )
        )
        return Decimal(str(result.scalar_one())).quantize(Decimal("0.01"))

    async def has_transactions(self, card_id: int) -> bool:
        """Check whether any transaction was charged to the card."""
        result = await self.session.execute(
            select(exists().where(Transaction.card_id == card_id))
        )
        return bool(result.scalar())

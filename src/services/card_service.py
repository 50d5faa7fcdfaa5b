"""
Card management service.

This module provides:
- Create, get, update and delete cards scoped to their owner
- Owner-scoped queries (by brand, name, closing day, due day)
- Limit aggregation (total, utilized and available)
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import DuplicateNameError, HasDependentsError, NotFoundError
from src.models.card import Card
from src.repositories.card_repository import CardRepository
from src.repositories.user_repository import UserRepository
from src.schemas.card import CardCreate, CardUpdate, CardUsageSummary
from src.schemas.common import PaginationParams

logger = logging.getLogger(__name__)


class CardService:
    """
    Service class for card management operations.

    Card names are unique per owner, ignoring case. A card id that belongs
    to another user is reported exactly like a missing one.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize CardService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.card_repo = CardRepository(session)
        self.user_repo = UserRepository(session)

    async def create_card(self, owner_id: int, data: CardCreate) -> Card:
        """
        Create a new card for a user.

        Args:
            owner_id: ID of the user who will own the card
            data: Card details

        Returns:
            Created Card instance

        Raises:
            NotFoundError: If the owner does not exist
            DuplicateNameError: If the owner already has a card with this name
        """
        if not await self.user_repo.exists(owner_id):
            raise NotFoundError("User")

        if await self.card_repo.name_exists(owner_id, data.name):
            logger.warning(
                f"User {owner_id} attempted to create card with duplicate name: {data.name}"
            )
            raise DuplicateNameError("Card", data.name)

        card = Card(user_id=owner_id, **data.model_dump())
        card = await self.card_repo.add(card)
        await self.session.commit()

        logger.info(f"Card {card.id} created for user {owner_id}")
        return card

    async def get_card(self, card_id: int, owner_id: int) -> Card:
        """
        Get one of the owner's cards.

        Raises:
            NotFoundError: If the card does not exist or belongs to another user
        """
        card = await self.card_repo.get_by_id_for_owner(card_id, owner_id)
        if card is None:
            raise NotFoundError("Card")
        return card

    async def update_card(self, card_id: int, owner_id: int, data: CardUpdate) -> Card:
        """
        Update one of the owner's cards.

        Only the fields present in the request are changed.

        Raises:
            NotFoundError: If the card does not exist or belongs to another user
            DuplicateNameError: If another card of the owner uses the new name
        """
        card = await self.get_card(card_id, owner_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes and await self.card_repo.name_exists(
            owner_id, changes["name"], exclude_id=card.id
        ):
            logger.warning(
                f"User {owner_id} attempted to rename card {card.id} "
                f"to duplicate name: {changes['name']}"
            )
            raise DuplicateNameError("Card", changes["name"])

        for field, value in changes.items():
            setattr(card, field, value)

        card = await self.card_repo.update(card)
        await self.session.commit()

        logger.info(f"Card {card.id} updated by user {owner_id}")
        return card

    async def delete_card(self, card_id: int, owner_id: int) -> None:
        """
        Delete one of the owner's cards.

        Raises:
            NotFoundError: If the card does not exist or belongs to another user
            HasDependentsError: If transactions were charged to the card
        """
        card = await self.get_card(card_id, owner_id)

        if await self.card_repo.has_transactions(card.id):
            logger.warning(
                f"User {owner_id} attempted to delete card {card.id} with transactions"
            )
            raise HasDependentsError("Card cannot be deleted while it has transactions")

        await self.card_repo.delete(card)
        await self.session.commit()

        logger.info(f"Card {card_id} deleted by user {owner_id}")

    async def list_cards(self, owner_id: int) -> list[Card]:
        """List the owner's cards ordered by name."""
        return await self.card_repo.list_by_owner(owner_id)

    async def list_cards_paginated(
        self, owner_id: int, pagination: PaginationParams
    ) -> tuple[list[Card], int]:
        """
        List one page of the owner's cards.

        Returns:
            Tuple of (cards, total_count)
        """
        items = await self.card_repo.list_by_owner(
            owner_id, offset=pagination.offset, limit=pagination.page_size
        )
        total = await self.card_repo.count_by_owner(owner_id)
        return items, total

    async def find_by_brand(self, owner_id: int, brand: str) -> list[Card]:
        return await self.card_repo.get_by_brand(owner_id, brand)

    async def search_by_name(self, owner_id: int, name: str) -> list[Card]:
        return await self.card_repo.search_by_name(owner_id, name)

    async def find_by_closing_day(self, owner_id: int, day: int) -> list[Card]:
        return await self.card_repo.get_by_closing_day(owner_id, day)

    async def find_by_due_day(self, owner_id: int, day: int) -> list[Card]:
        return await self.card_repo.get_by_due_day(owner_id, day)

    async def find_with_limit_above(self, owner_id: int, amount: Decimal) -> list[Card]:
        return await self.card_repo.get_with_limit_above(owner_id, amount)

    async def total_limit(self, owner_id: int) -> Decimal:
        return await self.card_repo.sum_credit_limit(owner_id)

    async def count_cards(self, owner_id: int) -> int:
        return await self.card_repo.count_by_owner(owner_id)

    async def name_exists(self, owner_id: int, name: str, exclude_id: int | None = None) -> bool:
        return await self.card_repo.name_exists(owner_id, name, exclude_id=exclude_id)

    async def usage_summary(self, owner_id: int) -> CardUsageSummary:
        """
        Aggregate limits over all of the owner's cards.

        Utilized limit counts every transaction on each card, whatever its
        type.
        """
        cards = await self.card_repo.list_by_owner(owner_id)
        total = sum((Decimal(card.credit_limit) for card in cards), Decimal("0.00"))
        utilized = sum((card.utilized_limit for card in cards), Decimal("0.00"))
        return CardUsageSummary(
            card_count=len(cards),
            total_limit=total,
            utilized_limit=utilized,
            available_limit=total - utilized,
        )

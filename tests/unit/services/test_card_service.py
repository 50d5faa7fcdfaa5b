"""
Unit tests for CardService.
"""

from datetime import date
from decimal import Decimal

import pytest

from src.exceptions import DuplicateNameError, HasDependentsError, NotFoundError
from src.models.enums import TransactionType
from src.schemas.card import CardCreate, CardUpdate
from src.schemas.common import PaginationParams
from src.schemas.transaction import TransactionCreate
from src.services.card_service import CardService
from src.services.transaction_service import TransactionService


def _card_data(name: str = "Grocery card", **overrides) -> CardCreate:
    fields = {
        "name": name,
        "brand": "Mastercard",
        "credit_limit": Decimal("1500.00"),
        "closing_day": 20,
        "due_day": 28,
    }
    fields.update(overrides)
    return CardCreate(**fields)


async def _charge(session, owner_id, account_id, card_id, amount, kind=TransactionType.expense):
    return await TransactionService(session).create_transaction(
        owner_id,
        TransactionCreate(
            description="Card charge",
            amount=Decimal(amount),
            transaction_date=date(2024, 5, 10),
            transaction_type=kind,
            account_id=account_id,
            card_id=card_id,
        ),
    )


@pytest.mark.asyncio
class TestCardService:
    """Test suite for CardService."""

    async def test_create_card(self, db_session, test_user):
        card = await CardService(db_session).create_card(test_user.id, _card_data())

        assert card.id is not None
        assert card.user_id == test_user.id
        assert card.available_limit == Decimal("1500.00")

    async def test_create_for_missing_owner_fails(self, db_session):
        with pytest.raises(NotFoundError):
            await CardService(db_session).create_card(999, _card_data())

    async def test_duplicate_name_fails(self, db_session, test_user, test_card):
        with pytest.raises(DuplicateNameError):
            await CardService(db_session).create_card(
                test_user.id, _card_data(name="travel CARD")
            )

    async def test_get_card_of_other_owner_is_not_found(
        self, db_session, other_user, test_card
    ):
        with pytest.raises(NotFoundError) as exc_info:
            await CardService(db_session).get_card(test_card.id, other_user.id)

        assert exc_info.value.message == "Card not found"

    async def test_update_card(self, db_session, test_user, test_card):
        card = await CardService(db_session).update_card(
            test_card.id,
            test_user.id,
            CardUpdate(credit_limit=Decimal("7500.00"), due_day=20),
        )

        assert card.credit_limit == Decimal("7500.00")
        assert card.due_day == 20
        assert card.closing_day == 5

    async def test_rename_to_sibling_name_fails(self, db_session, test_user, test_card):
        service = CardService(db_session)
        await service.create_card(test_user.id, _card_data())

        with pytest.raises(DuplicateNameError):
            await service.update_card(
                test_card.id, test_user.id, CardUpdate(name="Grocery Card")
            )

    async def test_delete_card(self, db_session, test_user, test_card):
        service = CardService(db_session)

        await service.delete_card(test_card.id, test_user.id)

        assert await service.count_cards(test_user.id) == 0

    async def test_delete_card_with_transactions_fails(
        self, db_session, test_user, test_account, test_card
    ):
        await _charge(db_session, test_user.id, test_account.id, test_card.id, "10.00")

        with pytest.raises(HasDependentsError):
            await CardService(db_session).delete_card(test_card.id, test_user.id)

    async def test_utilized_limit_counts_every_type(
        self, db_session, test_user, test_account, test_card
    ):
        await _charge(db_session, test_user.id, test_account.id, test_card.id, "300.00")
        await _charge(
            db_session,
            test_user.id,
            test_account.id,
            test_card.id,
            "200.00",
            kind=TransactionType.income,
        )

        card = await CardService(db_session).get_card(test_card.id, test_user.id)

        assert card.utilized_limit == Decimal("500.00")
        assert card.available_limit == Decimal("4500.00")

    async def test_usage_summary(self, db_session, test_user, test_account, test_card):
        service = CardService(db_session)
        await service.create_card(test_user.id, _card_data())
        await _charge(db_session, test_user.id, test_account.id, test_card.id, "1000.00")

        summary = await service.usage_summary(test_user.id)

        assert summary.card_count == 2
        assert summary.total_limit == Decimal("6500.00")
        assert summary.utilized_limit == Decimal("1000.00")
        assert summary.available_limit == Decimal("5500.00")

    async def test_queries(self, db_session, test_user, test_card):
        service = CardService(db_session)
        grocery = await service.create_card(test_user.id, _card_data())

        assert [c.id for c in await service.find_by_brand(test_user.id, "visa")] == [test_card.id]
        assert [c.id for c in await service.search_by_name(test_user.id, "groc")] == [grocery.id]
        assert [c.id for c in await service.find_by_closing_day(test_user.id, 20)] == [grocery.id]
        assert [c.id for c in await service.find_by_due_day(test_user.id, 15)] == [test_card.id]
        assert [
            c.id for c in await service.find_with_limit_above(test_user.id, Decimal("2000"))
        ] == [test_card.id]
        assert await service.total_limit(test_user.id) == Decimal("6500.00")
        assert await service.name_exists(test_user.id, "TRAVEL CARD") is True
        assert (
            await service.name_exists(test_user.id, "Travel card", exclude_id=test_card.id)
            is False
        )

    async def test_total_limit_without_cards(self, db_session, other_user):
        assert await CardService(db_session).total_limit(other_user.id) == Decimal("0.00")

    async def test_list_cards_paginated(self, db_session, test_user, test_card):
        service = CardService(db_session)
        await service.create_card(test_user.id, _card_data())

        items, total = await service.list_cards_paginated(
            test_user.id, PaginationParams(page=1, page_size=1)
        )

        assert total == 2
        assert [c.name for c in items] == ["Grocery card"]

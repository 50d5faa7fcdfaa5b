"""
Unit tests for TransactionService.

Tests:
- Creation with account and card ownership checks
- Update semantics (partial fields, moving accounts, detaching the card)
- Owner-scoped queries and filters
- Totals, financial summary and statistics
"""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from src.exceptions import BusinessRuleError, InvalidReferenceError, NotFoundError
from src.models.enums import TransactionType
from src.schemas.account import AccountCreate
from src.schemas.card import CardCreate
from src.schemas.common import PaginationParams
from src.schemas.transaction import (
    TransactionCreate,
    TransactionFilterParams,
    TransactionUpdate,
)
from src.services.account_service import AccountService
from src.services.card_service import CardService
from src.services.transaction_service import TransactionService


def _data(account_id: int, **overrides) -> TransactionCreate:
    fields = {
        "description": "Groceries",
        "amount": Decimal("42.50"),
        "transaction_date": date(2024, 3, 15),
        "transaction_type": TransactionType.expense,
        "account_id": account_id,
    }
    fields.update(overrides)
    return TransactionCreate(**fields)


@pytest.fixture
def service(db_session) -> TransactionService:
    return TransactionService(db_session)


@pytest_asyncio.fixture
async def ledger(service, test_user, test_account, test_card):
    """
    A small ledger for the test user:

    - 2024-01-10 income  3000.00 Salary (recurring)
    - 2024-01-20 expense  120.00 Electricity bill (recurring)
    - 2024-02-05 expense   80.00 Groceries on the card
    - 2024-03-01 income   150.00 Freelance
    """
    entries = [
        _data(
            test_account.id,
            description="Salary",
            amount=Decimal("3000.00"),
            transaction_date=date(2024, 1, 10),
            transaction_type=TransactionType.income,
            is_recurring=True,
        ),
        _data(
            test_account.id,
            description="Electricity bill",
            amount=Decimal("120.00"),
            transaction_date=date(2024, 1, 20),
            is_recurring=True,
        ),
        _data(
            test_account.id,
            description="Groceries",
            amount=Decimal("80.00"),
            transaction_date=date(2024, 2, 5),
            card_id=test_card.id,
        ),
        _data(
            test_account.id,
            description="Freelance",
            amount=Decimal("150.00"),
            transaction_date=date(2024, 3, 1),
            transaction_type=TransactionType.income,
        ),
    ]
    return [await service.create_transaction(test_user.id, entry) for entry in entries]


@pytest.mark.asyncio
class TestCreateTransaction:
    """Tests for TransactionService.create_transaction."""

    async def test_create_copies_owner_from_account(
        self, service, test_user, test_account
    ):
        transaction = await service.create_transaction(test_user.id, _data(test_account.id))

        assert transaction.id is not None
        assert transaction.user_id == test_user.id
        assert transaction.account.name == "Main checking"
        assert transaction.card is None
        assert transaction.is_recurring is False

    async def test_create_with_card(self, service, test_user, test_account, test_card):
        transaction = await service.create_transaction(
            test_user.id, _data(test_account.id, card_id=test_card.id)
        )

        assert transaction.card_id == test_card.id
        assert transaction.card.name == "Travel card"

    async def test_create_on_foreign_account_fails(
        self, service, other_user, test_account
    ):
        with pytest.raises(InvalidReferenceError) as exc_info:
            await service.create_transaction(other_user.id, _data(test_account.id))

        assert exc_info.value.error_code == "INVALID_REFERENCE"
        assert exc_info.value.details == {"resource": "account", "id": test_account.id}

    async def test_create_with_foreign_card_fails(
        self, db_session, service, other_user, test_card
    ):
        account = await AccountService(db_session).create_account(
            other_user.id,
            AccountCreate(
                name="Other checking",
                account_type="checking",
                initial_balance=Decimal("0.00"),
                institution="Other Bank",
            ),
        )

        with pytest.raises(InvalidReferenceError) as exc_info:
            await service.create_transaction(
                other_user.id, _data(account.id, card_id=test_card.id)
            )

        assert exc_info.value.details == {"resource": "card", "id": test_card.id}

    async def test_create_updates_account_balance(self, service, test_user, test_account):
        await service.create_transaction(test_user.id, _data(test_account.id))

        account = await AccountService(service.session).get_account(
            test_account.id, test_user.id
        )

        assert account.current_balance == Decimal("957.50")


@pytest.mark.asyncio
class TestUpdateAndDelete:
    """Tests for update and delete."""

    async def test_partial_update(self, service, test_user, test_account):
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        updated = await service.update_transaction(
            created.id, test_user.id, TransactionUpdate(amount=Decimal("50.00"))
        )

        assert updated.amount == Decimal("50.00")
        assert updated.description == "Groceries"
        assert updated.transaction_type == TransactionType.expense

    async def test_move_to_another_account(
        self, db_session, service, test_user, test_account
    ):
        savings = await AccountService(db_session).create_account(
            test_user.id,
            AccountCreate(
                name="Savings",
                account_type="savings",
                initial_balance=Decimal("0.00"),
                institution="Acme Bank",
            ),
        )
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        updated = await service.update_transaction(
            created.id, test_user.id, TransactionUpdate(account_id=savings.id)
        )

        assert updated.account_id == savings.id
        assert updated.account.name == "Savings"

    async def test_move_to_foreign_account_fails(
        self, db_session, service, test_user, other_user, test_account
    ):
        foreign = await AccountService(db_session).create_account(
            other_user.id,
            AccountCreate(
                name="Foreign",
                account_type="checking",
                initial_balance=Decimal("0.00"),
                institution="Other Bank",
            ),
        )
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        with pytest.raises(InvalidReferenceError):
            await service.update_transaction(
                created.id, test_user.id, TransactionUpdate(account_id=foreign.id)
            )

    async def test_null_card_detaches(self, service, test_user, test_account, test_card):
        created = await service.create_transaction(
            test_user.id, _data(test_account.id, card_id=test_card.id)
        )

        updated = await service.update_transaction(
            created.id, test_user.id, TransactionUpdate(card_id=None)
        )

        assert updated.card_id is None
        assert updated.card is None

    async def test_omitted_card_is_kept(self, service, test_user, test_account, test_card):
        created = await service.create_transaction(
            test_user.id, _data(test_account.id, card_id=test_card.id)
        )

        updated = await service.update_transaction(
            created.id, test_user.id, TransactionUpdate(description="Supermarket")
        )

        assert updated.card_id == test_card.id
        assert updated.description == "Supermarket"

    async def test_attach_card(self, service, test_user, test_account, test_card):
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        updated = await service.update_transaction(
            created.id, test_user.id, TransactionUpdate(card_id=test_card.id)
        )

        assert updated.card_id == test_card.id

    async def test_attach_foreign_card_fails(
        self, db_session, service, test_user, other_user, test_account
    ):
        foreign_card = await CardService(db_session).create_card(
            other_user.id,
            CardCreate(
                name="Foreign card",
                brand="Visa",
                credit_limit=Decimal("500.00"),
                closing_day=1,
                due_day=10,
            ),
        )
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        with pytest.raises(InvalidReferenceError) as exc_info:
            await service.update_transaction(
                created.id, test_user.id, TransactionUpdate(card_id=foreign_card.id)
            )

        assert exc_info.value.details == {"resource": "card", "id": foreign_card.id}

    async def test_update_of_foreign_transaction_fails(
        self, service, test_user, other_user, test_account
    ):
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        with pytest.raises(NotFoundError) as exc_info:
            await service.update_transaction(
                created.id, other_user.id, TransactionUpdate(amount=Decimal("1.00"))
            )

        assert exc_info.value.message == "Transaction not found"

    async def test_delete_transaction(self, service, test_user, test_account):
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        await service.delete_transaction(created.id, test_user.id)

        assert await service.count_transactions(test_user.id) == 0

    async def test_delete_foreign_transaction_fails(
        self, service, test_user, other_user, test_account
    ):
        created = await service.create_transaction(test_user.id, _data(test_account.id))

        with pytest.raises(NotFoundError):
            await service.delete_transaction(created.id, other_user.id)

        assert await service.count_transactions(test_user.id) == 1


@pytest.mark.asyncio
class TestQueries:
    """Tests for owner-scoped queries."""

    async def test_list_is_newest_first(self, service, test_user, ledger):
        items = await service.list_transactions(test_user.id)

        assert [t.description for t in items] == [
            "Freelance",
            "Groceries",
            "Electricity bill",
            "Salary",
        ]

    async def test_other_user_sees_nothing(self, service, other_user, ledger):
        assert await service.list_transactions(other_user.id) == []
        assert await service.count_transactions(other_user.id) == 0

    async def test_paginated(self, service, test_user, ledger):
        items, total = await service.list_transactions_paginated(
            test_user.id, PaginationParams(page=2, page_size=3)
        )

        assert total == 4
        assert [t.description for t in items] == ["Salary"]

    async def test_by_account_and_card(
        self, service, test_user, test_account, test_card, ledger
    ):
        assert len(await service.by_account(test_user.id, test_account.id)) == 4
        assert [t.description for t in await service.by_card(test_user.id, test_card.id)] == [
            "Groceries"
        ]

    async def test_by_foreign_account_fails(self, service, other_user, test_account, ledger):
        with pytest.raises(NotFoundError):
            await service.by_account(other_user.id, test_account.id)

    async def test_by_type_recurring_and_search(self, service, test_user, ledger):
        incomes = await service.by_type(test_user.id, TransactionType.income)
        recurring = await service.recurring(test_user.id)
        found = await service.search(test_user.id, "BILL")

        assert [t.description for t in incomes] == ["Freelance", "Salary"]
        assert [t.description for t in recurring] == ["Electricity bill", "Salary"]
        assert [t.description for t in found] == ["Electricity bill"]

    async def test_by_period_is_inclusive(self, service, test_user, ledger):
        items = await service.by_period(test_user.id, date(2024, 1, 20), date(2024, 2, 5))

        assert [t.description for t in items] == ["Groceries", "Electricity bill"]

    async def test_by_period_rejects_reversed_range(self, service, test_user):
        with pytest.raises(BusinessRuleError):
            await service.by_period(test_user.id, date(2024, 2, 1), date(2024, 1, 1))

    async def test_latest(self, service, test_user, ledger):
        items = await service.latest(test_user.id, limit=2)

        assert [t.description for t in items] == ["Freelance", "Groceries"]

    async def test_filter_combines_criteria(self, service, test_user, ledger):
        items, total = await service.filter_transactions(
            test_user.id,
            TransactionFilterParams(
                transaction_type=TransactionType.expense,
                date_from=date(2024, 1, 1),
                date_to=date(2024, 1, 31),
            ),
            PaginationParams(),
        )

        assert total == 1
        assert [t.description for t in items] == ["Electricity bill"]

    async def test_filter_rejects_reversed_range(self, service, test_user):
        with pytest.raises(BusinessRuleError):
            await service.filter_transactions(
                test_user.id,
                TransactionFilterParams(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1)),
                PaginationParams(),
            )


@pytest.mark.asyncio
class TestTotals:
    """Tests for sums, summary and statistics."""

    async def test_totals_all_time(self, service, test_user, ledger):
        assert await service.total_income(test_user.id) == Decimal("3150.00")
        assert await service.total_expense(test_user.id) == Decimal("200.00")

    async def test_totals_within_period(self, service, test_user, ledger):
        assert await service.total_income(
            test_user.id, date(2024, 2, 1), date(2024, 3, 31)
        ) == Decimal("150.00")
        assert await service.total_expense(
            test_user.id, date(2024, 2, 1), date(2024, 3, 31)
        ) == Decimal("80.00")

    async def test_totals_without_transactions(self, service, other_user):
        assert await service.total_income(other_user.id) == Decimal("0.00")
        assert await service.total_expense(other_user.id) == Decimal("0.00")

    async def test_financial_summary(self, service, test_user, ledger):
        summary = await service.financial_summary(test_user.id)

        assert summary.total_income == Decimal("3150.00")
        assert summary.total_expense == Decimal("200.00")
        assert summary.balance == Decimal("2950.00")
        assert summary.period_start is None

    async def test_financial_summary_may_be_negative(self, service, test_user, ledger):
        summary = await service.financial_summary(
            test_user.id, date(2024, 1, 15), date(2024, 2, 28)
        )

        assert summary.balance == Decimal("-200.00")
        assert summary.period_end == date(2024, 2, 28)

    async def test_stats_by_type(self, service, test_user, ledger):
        stats = await service.stats_by_type(test_user.id)

        assert stats.income_count == 2
        assert stats.expense_count == 2
        assert stats.recurring_count == 2
        assert stats.total_count == 4

    async def test_card_limit_reflects_ledger(
        self, db_session, test_user, test_card, ledger
    ):
        card = await CardService(db_session).get_card(test_card.id, test_user.id)

        assert card.utilized_limit == Decimal("80.00")
        assert card.available_limit == Decimal("4920.00")

    async def test_new_card_starts_unused(self, db_session, test_user):
        card = await CardService(db_session).create_card(
            test_user.id,
            CardCreate(
                name="Fresh card",
                brand="Elo",
                credit_limit=Decimal("100.00"),
                closing_day=1,
                due_day=10,
            ),
        )

        assert card.utilized_limit == Decimal("0.00")

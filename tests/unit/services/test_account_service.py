"""
Unit tests for AccountService.

Tests:
- Creation with per-owner name uniqueness
- Owner scoping of get, update and delete
- Deletion blocked by transactions
- Current and total balance
- Filtered queries
"""

from datetime import date
from decimal import Decimal

import pytest

from src.exceptions import DuplicateNameError, HasDependentsError, NotFoundError
from src.models.enums import AccountType, TransactionType
from src.schemas.account import AccountCreate, AccountUpdate
from src.schemas.common import PaginationParams
from src.schemas.transaction import TransactionCreate
from src.services.account_service import AccountService
from src.services.transaction_service import TransactionService


def _account_data(name: str = "Savings", **overrides) -> AccountCreate:
    fields = {
        "name": name,
        "account_type": AccountType.savings,
        "initial_balance": Decimal("250.00"),
        "institution": "Other Bank",
    }
    fields.update(overrides)
    return AccountCreate(**fields)


async def _book(session, owner_id: int, account_id: int, amount: str, kind: TransactionType):
    return await TransactionService(session).create_transaction(
        owner_id,
        TransactionCreate(
            description="Entry",
            amount=Decimal(amount),
            transaction_date=date(2024, 3, 1),
            transaction_type=kind,
            account_id=account_id,
        ),
    )


@pytest.mark.asyncio
class TestAccountService:
    """Test suite for AccountService."""

    async def test_create_account(self, db_session, test_user):
        account = await AccountService(db_session).create_account(
            test_user.id, _account_data()
        )

        assert account.id is not None
        assert account.user_id == test_user.id
        assert account.current_balance == Decimal("250.00")

    async def test_create_for_missing_owner_fails(self, db_session):
        with pytest.raises(NotFoundError):
            await AccountService(db_session).create_account(999, _account_data())

    async def test_duplicate_name_is_case_insensitive(self, db_session, test_user, test_account):
        with pytest.raises(DuplicateNameError):
            await AccountService(db_session).create_account(
                test_user.id, _account_data(name="MAIN CHECKING")
            )

    async def test_same_name_allowed_for_other_owner(
        self, db_session, other_user, test_account
    ):
        account = await AccountService(db_session).create_account(
            other_user.id, _account_data(name="Main checking")
        )

        assert account.user_id == other_user.id

    async def test_get_account_of_other_owner_is_not_found(
        self, db_session, other_user, test_account
    ):
        with pytest.raises(NotFoundError) as exc_info:
            await AccountService(db_session).get_account(test_account.id, other_user.id)

        assert exc_info.value.message == "Account not found"

    async def test_update_applies_only_sent_fields(self, db_session, test_user, test_account):
        account = await AccountService(db_session).update_account(
            test_account.id, test_user.id, AccountUpdate(institution="New Bank")
        )

        assert account.institution == "New Bank"
        assert account.name == "Main checking"
        assert account.initial_balance == Decimal("1000.00")

    async def test_rename_to_own_name_is_allowed(self, db_session, test_user, test_account):
        account = await AccountService(db_session).update_account(
            test_account.id, test_user.id, AccountUpdate(name="main checking")
        )

        assert account.name == "main checking"

    async def test_rename_to_sibling_name_fails(self, db_session, test_user, test_account):
        service = AccountService(db_session)
        await service.create_account(test_user.id, _account_data())

        with pytest.raises(DuplicateNameError):
            await service.update_account(
                test_account.id, test_user.id, AccountUpdate(name="savings")
            )

    async def test_delete_account(self, db_session, test_user, test_account):
        service = AccountService(db_session)

        await service.delete_account(test_account.id, test_user.id)

        with pytest.raises(NotFoundError):
            await service.get_account(test_account.id, test_user.id)

    async def test_delete_account_with_transactions_fails(
        self, db_session, test_user, test_account
    ):
        await _book(db_session, test_user.id, test_account.id, "10.00", TransactionType.expense)

        with pytest.raises(HasDependentsError):
            await AccountService(db_session).delete_account(test_account.id, test_user.id)

    async def test_delete_account_of_other_owner_fails(
        self, db_session, other_user, test_account
    ):
        with pytest.raises(NotFoundError):
            await AccountService(db_session).delete_account(test_account.id, other_user.id)

    async def test_current_and_total_balance(self, db_session, test_user, test_account):
        service = AccountService(db_session)
        savings = await service.create_account(test_user.id, _account_data())
        await _book(db_session, test_user.id, test_account.id, "500.00", TransactionType.income)
        await _book(db_session, test_user.id, test_account.id, "200.00", TransactionType.expense)
        await _book(db_session, test_user.id, savings.id, "50.00", TransactionType.expense)

        account = await service.get_account(test_account.id, test_user.id)

        assert service.compute_current_balance(account) == Decimal("1300.00")
        assert await service.compute_total_balance(test_user.id) == Decimal("1500.00")

    async def test_total_balance_without_accounts(self, db_session, other_user):
        assert await AccountService(db_session).compute_total_balance(
            other_user.id
        ) == Decimal("0.00")

    async def test_queries(self, db_session, test_user, test_account):
        service = AccountService(db_session)
        savings = await service.create_account(test_user.id, _account_data())
        await _book(db_session, test_user.id, test_account.id, "5.00", TransactionType.income)

        assert [a.id for a in await service.find_by_type(test_user.id, AccountType.savings)] == [
            savings.id
        ]
        assert [a.id for a in await service.find_by_institution(test_user.id, "acme")] == [
            test_account.id
        ]
        assert [a.id for a in await service.find_by_name_partial(test_user.id, "CHECK")] == [
            test_account.id
        ]
        assert [a.id for a in await service.find_active(test_user.id)] == [test_account.id]
        assert [a.id for a in await service.find_without_transactions(test_user.id)] == [
            savings.id
        ]
        assert await service.count_accounts(test_user.id) == 2

    async def test_list_accounts_paginated(self, db_session, test_user, test_account):
        service = AccountService(db_session)
        await service.create_account(test_user.id, _account_data())

        items, total = await service.list_accounts_paginated(
            test_user.id, PaginationParams(page=2, page_size=1)
        )

        assert total == 2
        # Ordered by name: "Main checking", "Savings"
        assert [a.name for a in items] == ["Savings"]

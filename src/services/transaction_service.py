"""
Transaction management service.

This module provides:
- Create, get, update and delete transactions scoped to their owner
- Filtered and paginated listing
- Totals, financial summary and per-type statistics

The owner of a transaction is always the owner of its account. The card,
when given, must belong to the same owner.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import BusinessRuleError, InvalidReferenceError, NotFoundError
from src.models.account import Account
from src.models.card import Card
from src.models.enums import TransactionType
from src.models.transaction import Transaction
from src.repositories.account_repository import AccountRepository
from src.repositories.card_repository import CardRepository
from src.repositories.transaction_repository import TransactionRepository
from src.schemas.common import PaginationParams
from src.schemas.transaction import (
    FinancialSummary,
    TransactionCreate,
    TransactionFilterParams,
    TransactionTypeStats,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Service class for transaction operations.

    All methods require an active database session. A transaction, account
    or card id that belongs to another user is reported like a missing one,
    except when a write references it, which is an invalid reference.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize TransactionService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.transaction_repo = TransactionRepository(session)
        self.account_repo = AccountRepository(session)
        self.card_repo = CardRepository(session)

    async def _owned_account(self, account_id: int, owner_id: int) -> Account:
        account = await self.account_repo.get_by_id_for_owner(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account")
        return account

    async def _owned_card(self, card_id: int, owner_id: int) -> Card:
        card = await self.card_repo.get_by_id_for_owner(card_id, owner_id)
        if card is None:
            raise NotFoundError("Card")
        return card

    async def _referenced_account(self, account_id: int, owner_id: int) -> Account:
        account = await self.account_repo.get_by_id_for_owner(account_id, owner_id)
        if account is None:
            raise InvalidReferenceError("Account", account_id)
        return account

    async def _referenced_card(self, card_id: int, owner_id: int) -> Card:
        card = await self.card_repo.get_by_id_for_owner(card_id, owner_id)
        if card is None:
            raise InvalidReferenceError("Card", card_id)
        return card

    @staticmethod
    def _check_period(date_from: date | None, date_to: date | None) -> None:
        if date_from and date_to and date_from > date_to:
            raise BusinessRuleError("Start date must be on or before end date")

    async def create_transaction(
        self, owner_id: int, data: TransactionCreate
    ) -> Transaction:
        """
        Book a new transaction.

        Args:
            owner_id: ID of the calling user
            data: Transaction details

        Returns:
            Created Transaction instance

        Raises:
            InvalidReferenceError: If the account, or the card when given,
                does not belong to the caller
        """
        # 1. Account and card must belong to the caller
        account = await self._referenced_account(data.account_id, owner_id)
        card = None
        if data.card_id is not None:
            card = await self._referenced_card(data.card_id, owner_id)

        # 2. Owner is copied from the account
        transaction = Transaction(
            description=data.description,
            amount=data.amount,
            transaction_date=data.transaction_date,
            transaction_type=data.transaction_type,
            is_recurring=data.is_recurring,
            account=account,
            card=card,
            user_id=account.user_id,
        )
        transaction = await self.transaction_repo.add(transaction)
        await self.session.commit()

        logger.info(
            f"Transaction {transaction.id} created on account {account.id} "
            f"for user {owner_id}"
        )
        return transaction

    async def get_transaction(self, transaction_id: int, owner_id: int) -> Transaction:
        """
        Get one of the owner's transactions.

        Raises:
            NotFoundError: If the transaction does not exist or belongs to
                another user
        """
        transaction = await self.transaction_repo.get_by_id_for_owner(
            transaction_id, owner_id
        )
        if transaction is None:
            raise NotFoundError("Transaction")
        return transaction

    async def update_transaction(
        self, transaction_id: int, owner_id: int, data: TransactionUpdate
    ) -> Transaction:
        """
        Update one of the owner's transactions.

        Only the fields present in the request are changed. Sending
        card_id as null detaches the card.

        Raises:
            NotFoundError: If the transaction does not belong to the caller
            InvalidReferenceError: If a new account or card does not belong
                to the caller
        """
        transaction = await self.get_transaction(transaction_id, owner_id)
        changes = data.model_dump(exclude_unset=True)

        account_id = changes.pop("account_id", None)
        if account_id is not None and account_id != transaction.account_id:
            account = await self._referenced_account(account_id, owner_id)
            transaction.account = account
            transaction.user_id = account.user_id

        if "card_id" in changes:
            card_id = changes.pop("card_id")
            card = None
            if card_id is not None:
                card = await self._referenced_card(card_id, owner_id)
            transaction.card = card

        for field, value in changes.items():
            if value is not None:
                setattr(transaction, field, value)

        transaction = await self.transaction_repo.update(transaction)
        await self.session.commit()

        logger.info(f"Transaction {transaction.id} updated by user {owner_id}")
        return transaction

    async def delete_transaction(self, transaction_id: int, owner_id: int) -> None:
        """
        Delete one of the owner's transactions.

        Raises:
            NotFoundError: If the transaction does not exist or belongs to
                another user
        """
        transaction = await self.get_transaction(transaction_id, owner_id)

        await self.transaction_repo.delete(transaction)
        await self.session.commit()

        logger.info(f"Transaction {transaction_id} deleted by user {owner_id}")

    async def list_transactions(self, owner_id: int) -> list[Transaction]:
        """List the owner's transactions, newest first."""
        return await self.transaction_repo.list_by_owner(owner_id)

    async def list_transactions_paginated(
        self, owner_id: int, pagination: PaginationParams
    ) -> tuple[list[Transaction], int]:
        """
        List one page of the owner's transactions.

        Returns:
            Tuple of (transactions, total_count)
        """
        return await self.transaction_repo.search(
            owner_id, offset=pagination.offset, limit=pagination.page_size
        )

    async def filter_transactions(
        self,
        owner_id: int,
        filters: TransactionFilterParams,
        pagination: PaginationParams,
    ) -> tuple[list[Transaction], int]:
        """
        Search the owner's transactions.

        Raises:
            BusinessRuleError: If date_from is after date_to
        """
        self._check_period(filters.date_from, filters.date_to)
        return await self.transaction_repo.search(
            owner_id,
            **filters.model_dump(),
            offset=pagination.offset,
            limit=pagination.page_size,
        )

    async def by_account(self, owner_id: int, account_id: int) -> list[Transaction]:
        """
        Transactions booked on one of the owner's accounts.

        Raises:
            NotFoundError: If the account does not belong to the caller
        """
        await self._owned_account(account_id, owner_id)
        return await self.transaction_repo.get_by_account(owner_id, account_id)

    async def by_card(self, owner_id: int, card_id: int) -> list[Transaction]:
        """
        Transactions charged to one of the owner's cards.

        Raises:
            NotFoundError: If the card does not belong to the caller
        """
        await self._owned_card(card_id, owner_id)
        return await self.transaction_repo.get_by_card(owner_id, card_id)

    async def by_type(
        self, owner_id: int, transaction_type: TransactionType
    ) -> list[Transaction]:
        return await self.transaction_repo.get_by_type(owner_id, transaction_type)

    async def by_period(
        self, owner_id: int, date_from: date, date_to: date
    ) -> list[Transaction]:
        self._check_period(date_from, date_to)
        return await self.transaction_repo.get_by_period(owner_id, date_from, date_to)

    async def recurring(self, owner_id: int) -> list[Transaction]:
        return await self.transaction_repo.get_recurring(owner_id)

    async def latest(self, owner_id: int, limit: int = 10) -> list[Transaction]:
        return await self.transaction_repo.get_latest(owner_id, limit)

    async def search(self, owner_id: int, description: str) -> list[Transaction]:
        return await self.transaction_repo.search_by_name(owner_id, description)

    async def total_income(
        self,
        owner_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Decimal:
        self._check_period(date_from, date_to)
        return await self.transaction_repo.sum_by_type(
            owner_id, TransactionType.income, date_from, date_to
        )

    async def total_expense(
        self,
        owner_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Decimal:
        self._check_period(date_from, date_to)
        return await self.transaction_repo.sum_by_type(
            owner_id, TransactionType.expense, date_from, date_to
        )

    async def financial_summary(
        self,
        owner_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> FinancialSummary:
        """
        Income, expense and their difference over an optional period.

        Raises:
            BusinessRuleError: If date_from is after date_to
        """
        income = await self.total_income(owner_id, date_from, date_to)
        expense = await self.total_expense(owner_id, date_from, date_to)
        return FinancialSummary(
            total_income=income,
            total_expense=expense,
            balance=income - expense,
            period_start=date_from,
            period_end=date_to,
        )

    async def count_transactions(self, owner_id: int) -> int:
        return await self.transaction_repo.count_by_owner(owner_id)

    async def stats_by_type(self, owner_id: int) -> TransactionTypeStats:
        """Count the owner's transactions per type and recurring ones."""
        income = await self.transaction_repo.count_by_type(owner_id, TransactionType.income)
        expense = await self.transaction_repo.count_by_type(
            owner_id, TransactionType.expense
        )
        return TransactionTypeStats(
            income_count=income,
            expense_count=expense,
            recurring_count=await self.transaction_repo.count_recurring(owner_id),
            total_count=income + expense,
        )

"""
Account management service.

This module provides:
- Create account with validation (owner exists, unique name per owner)
- Get, update and delete accounts scoped to their owner
- Owner-scoped queries (by type, institution, name, activity)
- Balance aggregation (per account and per owner)

An account id that belongs to another user is reported exactly like a
missing one.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import DuplicateNameError, HasDependentsError, NotFoundError
from src.models.account import Account
from src.models.enums import AccountType
from src.repositories.account_repository import AccountRepository
from src.repositories.user_repository import UserRepository
from src.schemas.account import AccountCreate, AccountUpdate
from src.schemas.common import PaginationParams

logger = logging.getLogger(__name__)


class AccountService:
    """
    Service class for account management operations.

    This service handles:
    - Account creation with uniqueness validation
    - Account retrieval, update and deletion (owner only)
    - Account listing and filtering
    - Current and total balance computation

    All methods require an active database session.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize AccountService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.user_repo = UserRepository(session)

    @staticmethod
    def compute_current_balance(account: Account) -> Decimal:
        """
        Initial balance plus incomes minus expenses of an account.

        Uses Decimal arithmetic; an account without transactions keeps its
        initial balance.
        """
        return account.current_balance

    async def create_account(self, owner_id: int, data: AccountCreate) -> Account:
        """
        Create a new account for a user.

        Args:
            owner_id: ID of the user who will own the account
            data: Account details

        Returns:
            Created Account instance

        Raises:
            NotFoundError: If the owner does not exist
            DuplicateNameError: If the owner already has an account with
                this name (case-insensitive)

        Example:
            account = await account_service.create_account(
                owner_id=user.id,
                data=AccountCreate(
                    name="Main checking",
                    account_type=AccountType.checking,
                    initial_balance=Decimal("100.00"),
                    institution="Acme Bank",
                ),
            )
        """
        # 1. Owner must exist
        if not await self.user_repo.exists(owner_id):
            raise NotFoundError("User")

        # 2. Name unique per owner
        if await self.account_repo.name_exists(owner_id, data.name):
            logger.warning(
                f"User {owner_id} attempted to create account with duplicate name: {data.name}"
            )
            raise DuplicateNameError("Account", data.name)

        # 3. Persist
        account = Account(
            user_id=owner_id,
            name=data.name,
            account_type=data.account_type,
            initial_balance=data.initial_balance,
            institution=data.institution,
        )
        account = await self.account_repo.add(account)
        await self.session.commit()

        logger.info(f"Account {account.id} created for user {owner_id}")
        return account

    async def get_account(self, account_id: int, owner_id: int) -> Account:
        """
        Get one of the owner's accounts.

        Raises:
            NotFoundError: If the account does not exist or belongs to
                another user
        """
        account = await self.account_repo.get_by_id_for_owner(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account")
        return account

    async def update_account(
        self, account_id: int, owner_id: int, data: AccountUpdate
    ) -> Account:
        """
        Update one of the owner's accounts.

        Only the fields present in the request are changed.

        Args:
            account_id: ID of the account
            owner_id: ID of the user who must own the account
            data: Fields to change

        Returns:
            Updated Account instance

        Raises:
            NotFoundError: If the account does not exist or belongs to
                another user
            DuplicateNameError: If another account of the owner already
                uses the new name
        """
        account = await self.get_account(account_id, owner_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes and await self.account_repo.name_exists(
            owner_id, changes["name"], exclude_id=account.id
        ):
            logger.warning(
                f"User {owner_id} attempted to rename account {account.id} "
                f"to duplicate name: {changes['name']}"
            )
            raise DuplicateNameError("Account", changes["name"])

        for field, value in changes.items():
            setattr(account, field, value)

        account = await self.account_repo.update(account)
        await self.session.commit()

        logger.info(f"Account {account.id} updated by user {owner_id}")
        return account

    async def delete_account(self, account_id: int, owner_id: int) -> None:
        """
        Delete one of the owner's accounts.

        Raises:
            NotFoundError: If the account does not exist or belongs to
                another user
            HasDependentsError: If the account has transactions
        """
        account = await self.get_account(account_id, owner_id)

        if await self.account_repo.has_transactions(account.id):
            logger.warning(
                f"User {owner_id} attempted to delete account {account.id} with transactions"
            )
            raise HasDependentsError("Account cannot be deleted while it has transactions")

        await self.account_repo.delete(account)
        await self.session.commit()

        logger.info(f"Account {account_id} deleted by user {owner_id}")

    async def list_accounts(self, owner_id: int) -> list[Account]:
        """List the owner's accounts ordered by name."""
        return await self.account_repo.list_by_owner(owner_id)

    async def list_accounts_paginated(
        self, owner_id: int, pagination: PaginationParams
    ) -> tuple[list[Account], int]:
        """
        List one page of the owner's accounts.

        Returns:
            Tuple of (accounts, total_count)
        """
        items = await self.account_repo.list_by_owner(
            owner_id, offset=pagination.offset, limit=pagination.page_size
        )
        total = await self.account_repo.count_by_owner(owner_id)
        return items, total

    async def find_by_type(self, owner_id: int, account_type: AccountType) -> list[Account]:
        return await self.account_repo.get_by_type(owner_id, account_type)

    async def find_by_institution(self, owner_id: int, institution: str) -> list[Account]:
        return await self.account_repo.get_by_institution(owner_id, institution)

    async def find_by_name_partial(self, owner_id: int, name: str) -> list[Account]:
        return await self.account_repo.search_by_name(owner_id, name)

    async def find_active(self, owner_id: int) -> list[Account]:
        """Accounts with at least one transaction."""
        return await self.account_repo.get_active(owner_id)

    async def find_without_transactions(self, owner_id: int) -> list[Account]:
        return await self.account_repo.get_without_transactions(owner_id)

    async def count_accounts(self, owner_id: int) -> int:
        return await self.account_repo.count_by_owner(owner_id)

    async def compute_total_balance(self, owner_id: int) -> Decimal:
        """
        Sum of the current balances of all the owner's accounts.

        Returns:
            Total balance, Decimal("0.00") when the owner has no accounts
        """
        accounts = await self.account_repo.list_by_owner(owner_id)
        return sum(
            (self.compute_current_balance(account) for account in accounts),
            Decimal("0.00"),
        )

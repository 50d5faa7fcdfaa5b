"""
Account model.

This module defines:
- Account: A bank account owned by a single user

Balance Calculation:
- current_balance = initial_balance + SUM(income) - SUM(expense)
- Computed from the loaded transactions collection, never stored
- Uses Decimal arithmetic end to end (no float rounding drift)

Uniqueness:
- Account names are unique per owner, case-insensitively. This is checked
  by AccountService on create and update, not by a database constraint.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum as SQLEnum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import AccountType
from src.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from src.models.transaction import Transaction


# =============================================================================
# Account Model
# =============================================================================


class Account(Base, TimestampMixin):
    """
    Bank account belonging to a user.

    Attributes:
        id: Integer primary key
        user_id: Owner of the account (REQUIRED)
        name: Display name (2-100 characters, unique per owner ignoring case)
        account_type: checking, savings or investment
        initial_balance: Balance when the account was registered (>= 0)
        institution: Name of the bank or broker (2-100 characters)
        created_at: Timestamp when created (from TimestampMixin)
        updated_at: Timestamp when last updated (from TimestampMixin)

    Relationships:
        transactions: Every transaction booked on this account

    Constraints:
        - initial_balance >= 0
        - deleting the owner cascades to the account
        - deleting the account cascades to its transactions at the storage
          layer, but AccountService refuses to delete accounts that still
          have transactions

    Example:
        account = Account(
            user_id=user.id,
            name="Main checking",
            account_type=AccountType.checking,
            initial_balance=Decimal("1500.00"),
            institution="Acme Bank",
        )
    """

    __tablename__ = "accounts"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    account_type: Mapped[AccountType] = mapped_column(
        SQLEnum(AccountType, name="account_type", create_constraint=True),
        nullable=False,
        index=True,
    )

    initial_balance: Mapped[Decimal] = mapped_column(
        Numeric(15, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    institution: Mapped[str] = mapped_column(String(100), nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="account",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "initial_balance >= 0",
            name="initial_balance_non_negative",
        ),
    )

    @property
    def current_balance(self) -> Decimal:
        """
        Initial balance plus incomes minus expenses.

        Returns:
            Current balance; equals initial_balance when there are no
            transactions.
        """
        balance = Decimal(self.initial_balance)
        for transaction in self.transactions:
            if transaction.is_income:
                balance += transaction.amount
            elif transaction.is_expense:
                balance -= transaction.amount
        return balance

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    def __repr__(self) -> str:
        """String representation of the Account."""
        return f"Account(id={self.id}, name={self.name!r}, user_id={self.user_id})"

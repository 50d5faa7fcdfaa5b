"""
Transaction model.

This module defines:
- Transaction: A single income or expense booked on an account

Ownership:
- account_id is REQUIRED; card_id is optional
- user_id duplicates the account owner and is always copied from the
  account by TransactionService, so both stay consistent
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.enums import TransactionType
from src.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from src.models.account import Account
    from src.models.card import Card


# =============================================================================
# Transaction Model
# =============================================================================


class Transaction(Base, TimestampMixin):
    """
    Financial transaction model.

    Attributes:
        id: Integer primary key
        description: What the transaction was for (2-200 characters)
        amount: Positive monetary value (>= 0.01)
        transaction_date: Calendar date of the transaction
        transaction_type: income or expense
        is_recurring: Whether the transaction repeats every period
        account_id: Account the transaction is booked on (REQUIRED)
        card_id: Card the transaction was charged to (optional)
        user_id: Owner, always equal to the account's owner

    Relationships:
        account: Owning account
        card: Card used, if any
    """

    __tablename__ = "transactions"

    description: Mapped[str] = mapped_column(String(200), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    transaction_type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, name="transaction_type", create_constraint=True),
        nullable=False,
        index=True,
    )

    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    card_id: Mapped[int | None] = mapped_column(
        ForeignKey("cards.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    account: Mapped["Account"] = relationship(
        "Account",
        back_populates="transactions",
        lazy="selectin",
    )

    card: Mapped["Card | None"] = relationship(
        "Card",
        back_populates="transactions",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("amount >= 0.01", name="amount_positive"),
    )

    @property
    def is_income(self) -> bool:
        return self.transaction_type == TransactionType.income

    @property
    def is_expense(self) -> bool:
        return self.transaction_type == TransactionType.expense

    @property
    def is_card_transaction(self) -> bool:
        return self.card_id is not None

    def __repr__(self) -> str:
        """String representation of the Transaction."""
        return (
            f"Transaction(id={self.id}, amount={self.amount}, "
            f"type={self.transaction_type.value}, date={self.transaction_date})"
        )

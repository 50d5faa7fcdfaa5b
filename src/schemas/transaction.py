"""
Transaction Pydantic schemas for API request/response handling.

This module provides:
- Transaction creation and update schemas
- Transaction response schema (with account and card references)
- Filter parameters for search endpoints
- Financial summary and per-type statistics responses
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import TransactionType


class TransactionCreate(BaseModel):
    """
    Schema for transaction creation.

    The owner is taken from the account, which must belong to the caller.

    Attributes:
        description: What the transaction was for (2-200 characters)
        amount: Positive amount (>= 0.01, two decimal places)
        transaction_date: Calendar date of the transaction
        transaction_type: income or expense
        is_recurring: Whether the transaction repeats
        account_id: Account to book the transaction on
        card_id: Optional card the transaction was charged to
    """

    description: str = Field(min_length=2, max_length=200, examples=["Groceries"])
    amount: Decimal = Field(
        ge=Decimal("0.01"), max_digits=15, decimal_places=2, examples=["42.50"]
    )
    transaction_date: date = Field(examples=["2024-03-15"])
    transaction_type: TransactionType = Field(examples=["expense"])
    is_recurring: bool = Field(default=False)
    account_id: int
    card_id: int | None = None

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Description must have at least 2 non-blank characters")
        return value


class TransactionUpdate(BaseModel):
    """
    Schema for updating a transaction.

    All fields are optional; only the fields sent are changed. Sending
    card_id as null detaches the card.
    """

    description: str | None = Field(default=None, min_length=2, max_length=200)
    amount: Decimal | None = Field(
        default=None, ge=Decimal("0.01"), max_digits=15, decimal_places=2
    )
    transaction_date: date | None = None
    transaction_type: TransactionType | None = None
    is_recurring: bool | None = None
    account_id: int | None = None
    card_id: int | None = None

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str | None) -> str | None:
        """Trim surrounding whitespace."""
        if value is None:
            return value
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Description must have at least 2 non-blank characters")
        return value


class AccountRef(BaseModel):
    """Minimal account reference embedded in transaction responses."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CardRef(BaseModel):
    """Minimal card reference embedded in transaction responses."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TransactionResponse(BaseModel):
    """
    Schema for transaction response.

    Attributes:
        id: Transaction id
        description: Description
        amount: Amount
        transaction_date: Calendar date
        transaction_type: income or expense
        is_recurring: Recurring flag
        account_id: Account id
        card_id: Card id, if any
        is_card_transaction: Whether the transaction was charged to a card
        user_id: Owner's user id
        account: Account reference (id, name)
        card: Card reference (id, name), if any
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    description: str
    amount: Decimal
    transaction_date: date
    transaction_type: TransactionType
    is_recurring: bool
    account_id: int
    card_id: int | None
    is_card_transaction: bool
    user_id: int
    account: AccountRef
    card: CardRef | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionFilterParams(BaseModel):
    """
    Query parameters for filtering transactions.

    Attributes:
        transaction_type: Only income or only expense
        account_id: Only this account
        card_id: Only this card
        date_from: On or after this date
        date_to: On or before this date
        description: Case-insensitive description substring
        is_recurring: Only recurring or only one-off transactions
    """

    transaction_type: TransactionType | None = None
    account_id: int | None = None
    card_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    description: str | None = Field(default=None, max_length=200)
    is_recurring: bool | None = None


class FinancialSummary(BaseModel):
    """
    Income, expense and balance over an optional period.

    Attributes:
        total_income: Sum of income amounts
        total_expense: Sum of expense amounts
        balance: total_income - total_expense
        period_start: Start of the period (None for all time)
        period_end: End of the period (None for all time)
    """

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    period_start: date | None = None
    period_end: date | None = None


class TransactionTypeStats(BaseModel):
    """Transaction counts per type."""

    income_count: int
    expense_count: int
    recurring_count: int
    total_count: int

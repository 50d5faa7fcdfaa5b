"""
Account Pydantic schemas for API request/response handling.

This module provides:
- Account creation and update schemas
- Account response schema (with computed current balance)
- Total balance response
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import AccountType


def _strip_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Value must have at least 2 non-blank characters")
    return value


class AccountCreate(BaseModel):
    """
    Schema for account creation.

    Attributes:
        name: Account name (unique per user, case-insensitive)
        account_type: checking, savings or investment
        initial_balance: Opening balance (>= 0, two decimal places)
        institution: Bank or broker name
    """

    name: str = Field(min_length=2, max_length=100, examples=["Main checking"])
    account_type: AccountType = Field(examples=["checking"])
    initial_balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=15,
        decimal_places=2,
        examples=["1500.00"],
    )
    institution: str = Field(min_length=2, max_length=100, examples=["Acme Bank"])

    @field_validator("name", "institution")
    @classmethod
    def strip_text(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        return _strip_text(value)


class AccountUpdate(BaseModel):
    """
    Schema for updating an account.

    All fields are optional; only the fields sent are changed.
    """

    name: str | None = Field(default=None, min_length=2, max_length=100)
    account_type: AccountType | None = None
    initial_balance: Decimal | None = Field(
        default=None, ge=0, max_digits=15, decimal_places=2
    )
    institution: str | None = Field(default=None, min_length=2, max_length=100)

    @field_validator("name", "institution")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        """Trim surrounding whitespace if provided."""
        return _strip_text(value)


class AccountResponse(BaseModel):
    """
    Schema for account response.

    Attributes:
        id: Account id
        user_id: Owner's user id
        name: Account name
        account_type: Account type
        initial_balance: Opening balance
        current_balance: Opening balance plus incomes minus expenses
        institution: Bank or broker name
        transaction_count: Number of transactions on the account
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    user_id: int
    name: str
    account_type: AccountType
    initial_balance: Decimal
    current_balance: Decimal
    institution: str
    transaction_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TotalBalanceResponse(BaseModel):
    """Sum of the current balances of all the user's accounts."""

    total_balance: Decimal

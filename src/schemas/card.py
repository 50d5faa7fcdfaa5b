"""
Card Pydantic schemas for API request/response handling.

This module provides:
- Card creation and update schemas
- Card response schema (with utilized and available limit)
- Usage summary and name availability responses
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Value must have at least 2 non-blank characters")
    return value


class CardCreate(BaseModel):
    """
    Schema for card creation.

    Attributes:
        name: Card display name (unique per user, case-insensitive)
        brand: Card network, e.g. Visa or Mastercard
        credit_limit: Total credit limit (> 0)
        closing_day: Statement closing day (1-31)
        due_day: Statement due day (1-31)
    """

    name: str = Field(min_length=2, max_length=100, examples=["Travel card"])
    brand: str = Field(min_length=2, max_length=50, examples=["Visa"])
    credit_limit: Decimal = Field(
        gt=0, max_digits=15, decimal_places=2, examples=["5000.00"]
    )
    closing_day: int = Field(ge=1, le=31, examples=[5])
    due_day: int = Field(ge=1, le=31, examples=[15])

    @field_validator("name", "brand")
    @classmethod
    def strip_text(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        return _strip_text(value)


class CardUpdate(BaseModel):
    """
    Schema for updating a card.

    All fields are optional; only the fields sent are changed.
    """

    name: str | None = Field(default=None, min_length=2, max_length=100)
    brand: str | None = Field(default=None, min_length=2, max_length=50)
    credit_limit: Decimal | None = Field(
        default=None, gt=0, max_digits=15, decimal_places=2
    )
    closing_day: int | None = Field(default=None, ge=1, le=31)
    due_day: int | None = Field(default=None, ge=1, le=31)

    @field_validator("name", "brand")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        """Trim surrounding whitespace if provided."""
        return _strip_text(value)


class CardResponse(BaseModel):
    """
    Schema for card response.

    Attributes:
        id: Card id
        user_id: Owner's user id
        name: Card display name
        brand: Card network
        credit_limit: Total credit limit
        closing_day: Statement closing day
        due_day: Statement due day
        utilized_limit: Sum of all transactions charged to the card
        available_limit: credit_limit - utilized_limit (may be negative)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    user_id: int
    name: str
    brand: str
    credit_limit: Decimal
    closing_day: int
    due_day: int
    utilized_limit: Decimal
    available_limit: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CardUsageSummary(BaseModel):
    """Aggregated limits over all of the user's cards."""

    card_count: int
    total_limit: Decimal
    utilized_limit: Decimal
    available_limit: Decimal


class NameAvailabilityResponse(BaseModel):
    """Whether the user already has a card with the given name."""

    name: str
    exists: bool

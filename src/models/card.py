"""
Card model.

This module defines:
- Card: A credit card owned by a single user

Limit Calculation:
- utilized_limit = SUM(amount) over every transaction linked to the card,
  regardless of transaction type
- available_limit = credit_limit - utilized_limit (may be negative, not clamped)
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base
from src.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from src.models.transaction import Transaction


# =============================================================================
# Card Model
# =============================================================================


class Card(Base, TimestampMixin):
    """
    Credit card belonging to a user.

    Attributes:
        id: Integer primary key
        user_id: Owner of the card (REQUIRED)
        name: Display name (2-100 characters, unique per owner ignoring case)
        brand: Card network, e.g. "Visa" (2-50 characters)
        credit_limit: Total credit limit (> 0)
        closing_day: Day of month the statement closes (1-31)
        due_day: Day of month the statement is due (1-31)

    Relationships:
        transactions: Transactions charged to this card

    Constraints:
        - credit_limit > 0
        - closing_day and due_day between 1 and 31
        - deleting the card sets card_id to NULL on its transactions
    """

    __tablename__ = "cards"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    brand: Mapped[str] = mapped_column(String(50), nullable=False)

    credit_limit: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)

    closing_day: Mapped[int] = mapped_column(Integer, nullable=False)

    due_day: Mapped[int] = mapped_column(Integer, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="card",
        lazy="selectin",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("credit_limit > 0", name="credit_limit_positive"),
        CheckConstraint(
            "closing_day >= 1 AND closing_day <= 31",
            name="closing_day_range",
        ),
        CheckConstraint("due_day >= 1 AND due_day <= 31", name="due_day_range"),
    )

    @property
    def utilized_limit(self) -> Decimal:
        """Sum of every transaction amount charged to the card."""
        return sum((t.amount for t in self.transactions), Decimal("0.00"))

    @property
    def available_limit(self) -> Decimal:
        """Credit limit minus utilized limit."""
        return Decimal(self.credit_limit) - self.utilized_limit

    def __repr__(self) -> str:
        """String representation of the Card."""
        return f"Card(id={self.id}, name={self.name!r}, brand={self.brand!r})"

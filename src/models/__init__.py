"""
Database models for the Bookkeeper Finance API.

This module exports all SQLAlchemy models and the declarative base.
Import models from this module to ensure proper initialization.
"""

from src.models.account import Account
from src.models.base import Base
from src.models.card import Card
from src.models.enums import AccountType, TransactionType, UserRole
from src.models.mixins import TimestampMixin
from src.models.transaction import Transaction
from src.models.user import User

__all__ = [
    # Base
    "Base",
    # Mixins
    "TimestampMixin",
    # Models
    "User",
    "Account",
    "Card",
    "Transaction",
    # Enums
    "UserRole",
    "AccountType",
    "TransactionType",
]

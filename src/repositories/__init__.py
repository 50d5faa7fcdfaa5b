"""
Repository layer for database operations.

This package provides repository classes that encapsulate data access,
implementing the repository pattern for clean separation of concerns.
"""

from src.repositories.account_repository import AccountRepository
from src.repositories.base import BaseRepository, OwnedRepository
from src.repositories.card_repository import CardRepository
from src.repositories.transaction_repository import TransactionRepository
from src.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OwnedRepository",
    "UserRepository",
    "AccountRepository",
    "CardRepository",
    "TransactionRepository",
]

"""
Service layer for business logic.

This package provides service classes that implement business logic,
coordinate between repositories, and handle transaction management.
"""

from src.services.account_service import AccountService
from src.services.auth_service import AuthLookupService, AuthService
from src.services.card_service import CardService
from src.services.token_service import TokenConfig, TokenService
from src.services.transaction_service import TransactionService
from src.services.user_service import UserService

__all__ = [
    "AccountService",
    "AuthLookupService",
    "AuthService",
    "CardService",
    "TokenConfig",
    "TokenService",
    "TransactionService",
    "UserService",
]

"""
API routes for the Bookkeeper Finance API.

This package contains all API endpoint definitions organized by feature.
"""

from src.api.routes import accounts, auth, cards, health, root, transactions, users

__all__ = ["accounts", "auth", "cards", "health", "root", "transactions", "users"]

"""
Core module for the Bookkeeper Finance API.

Exports the main configuration and database health components.
"""

from src.core.config import settings
from src.core.database import check_database_connection

__all__ = [
    # Config
    "settings",
    # Database
    "check_database_connection",
]

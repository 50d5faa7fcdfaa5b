"""
Enums for users, accounts and transactions.

This module defines:
- UserRole: Access role of a user (admin, user)
- AccountType: Kind of bank account (checking, savings, investment)
- TransactionType: Direction of a transaction (income, expense)

The enums are stored by name in the database and exposed by value in the API.
"""

import enum


class UserRole(str, enum.Enum):
    """
    Access role of a user.

    Attributes:
        admin: May list, search and manage every user
        user: Regular user, sees only their own data (default on registration)
    """

    admin = "admin"
    user = "user"


class AccountType(str, enum.Enum):
    """
    Kind of bank account.

    Attributes:
        checking: Everyday current account
        savings: Savings account
        investment: Brokerage or investment account
    """

    checking = "checking"
    savings = "savings"
    investment = "investment"


class TransactionType(str, enum.Enum):
    """
    Direction of a transaction.

    Attributes:
        income: Money coming in, adds to the account balance
        expense: Money going out, subtracts from the account balance
    """

    income = "income"
    expense = "expense"

"""Initial schema for the Bookkeeper Finance API

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2025-11-20

Tables Created:
- users: Identity, credentials, role and active flag
- accounts: Bank accounts owned by a user
- cards: Credit cards owned by a user
- transactions: Income and expense entries booked on an account,
  optionally charged to a card

Enum types user_role, account_type and transaction_type are created with
their tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('admin', 'user', name='user_role', create_constraint=True)
account_type = sa.Enum(
    'checking', 'savings', 'investment', name='account_type', create_constraint=True
)
transaction_type = sa.Enum(
    'income', 'expense', name='transaction_type', create_constraint=True
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create users, accounts, cards and transactions."""
    # users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    # accounts table
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('account_type', account_type, nullable=False),
        sa.Column('initial_balance', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('institution', sa.String(length=100), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            'initial_balance >= 0',
            name=op.f('ck_accounts_initial_balance_non_negative'),
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_accounts_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts')),
    )
    op.create_index(op.f('ix_accounts_user_id'), 'accounts', ['user_id'], unique=False)
    op.create_index(
        op.f('ix_accounts_account_type'), 'accounts', ['account_type'], unique=False
    )

    # cards table
    op.create_table(
        'cards',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('brand', sa.String(length=50), nullable=False),
        sa.Column('credit_limit', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('closing_day', sa.Integer(), nullable=False),
        sa.Column('due_day', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('credit_limit > 0', name=op.f('ck_cards_credit_limit_positive')),
        sa.CheckConstraint(
            'closing_day >= 1 AND closing_day <= 31',
            name=op.f('ck_cards_closing_day_range'),
        ),
        sa.CheckConstraint(
            'due_day >= 1 AND due_day <= 31',
            name=op.f('ck_cards_due_day_range'),
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_cards_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_cards')),
    )
    op.create_index(op.f('ix_cards_user_id'), 'cards', ['user_id'], unique=False)

    # transactions table
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('transaction_date', sa.Date(), nullable=False),
        sa.Column('transaction_type', transaction_type, nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('card_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0.01', name=op.f('ck_transactions_amount_positive')),
        sa.ForeignKeyConstraint(
            ['account_id'], ['accounts.id'],
            name=op.f('fk_transactions_account_id_accounts'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['card_id'], ['cards.id'],
            name=op.f('fk_transactions_card_id_cards'),
            ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_transactions_user_id_users'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_transactions')),
    )
    op.create_index(
        op.f('ix_transactions_transaction_date'),
        'transactions', ['transaction_date'], unique=False,
    )
    op.create_index(
        op.f('ix_transactions_transaction_type'),
        'transactions', ['transaction_type'], unique=False,
    )
    op.create_index(
        op.f('ix_transactions_account_id'), 'transactions', ['account_id'], unique=False
    )
    op.create_index(
        op.f('ix_transactions_card_id'), 'transactions', ['card_id'], unique=False
    )
    op.create_index(
        op.f('ix_transactions_user_id'), 'transactions', ['user_id'], unique=False
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table('transactions')
    op.drop_table('cards')
    op.drop_table('accounts')
    op.drop_table('users')

    bind = op.get_bind()
    transaction_type.drop(bind, checkfirst=True)
    account_type.drop(bind, checkfirst=True)
    user_role.drop(bind, checkfirst=True)

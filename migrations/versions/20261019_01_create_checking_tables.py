"""create checking account, ledger and withdrawal limit tables

Revision ID: 3f9c1e7a2b40
Revises: 
Create Date: 2026-10-19 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1e7a2b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "checking_accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("currency_id", sa.String(length=10), nullable=False),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "currency_id", name="uq_checking_accounts_user_currency"),
    )
    op.create_index("ix_checking_accounts_user_id", "checking_accounts", ["user_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("currency_id", sa.String(length=10), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index(
        "ix_transactions_user_currency_type_created",
        "transactions",
        ["user_id", "currency_id", "type", "created_at"],
    )

    op.create_table(
        "withdrawal_limits",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("currency_id", sa.String(length=10), nullable=False),
        sa.Column("daily_limit", sa.Numeric(18, 2), nullable=False),
        sa.Column("monthly_limit", sa.Numeric(18, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "currency_id", name="uq_withdrawal_limits_user_currency"),
    )
    op.create_index("ix_withdrawal_limits_user_id", "withdrawal_limits", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_withdrawal_limits_user_id", table_name="withdrawal_limits")
    op.drop_table("withdrawal_limits")

    op.drop_index("ix_transactions_user_currency_type_created", table_name="transactions")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_index("ix_transactions_account_id", table_name="transactions")
    op.drop_table("transactions")

    op.drop_index("ix_checking_accounts_user_id", table_name="checking_accounts")
    op.drop_table("checking_accounts")

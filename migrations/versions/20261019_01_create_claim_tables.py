"""create claim history and transaction tables

Revision ID: 3f9c1a7d2b10
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("wallet_address", sa.String(length=64), nullable=False),
        sa.Column("ip_address", sa.Text(), nullable=False, server_default=""),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("tx_hash", sa.String(length=128)),
        sa.Column("error_message", sa.Text()),
        sa.Column("timestamp", sa.String(length=32), nullable=False),
    )
    op.create_index("ix_transactions_wallet_address", "transactions", ["wallet_address"])
    op.create_index("ix_transactions_timestamp", "transactions", ["timestamp"])

    op.create_table(
        "claim_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("wallet_address", sa.String(length=64), nullable=False),
        sa.Column("ip_address", sa.Text(), nullable=False, server_default=""),
        sa.Column("last_claim_time", sa.String(length=32), nullable=False),
        sa.Column("claim_count", sa.Integer(), nullable=False, server_default="1"),
        sa.UniqueConstraint("wallet_address"),
    )


def downgrade() -> None:
    op.drop_table("claim_history")
    op.drop_index("ix_transactions_timestamp", table_name="transactions")
    op.drop_index("ix_transactions_wallet_address", table_name="transactions")
    op.drop_table("transactions")

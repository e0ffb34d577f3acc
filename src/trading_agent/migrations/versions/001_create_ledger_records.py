"""Create the ledger records table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Schema is created by env.py before migrations run.
    op.create_table(
        "records",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("record_type", sa.Text, nullable=False),
        sa.Column("instrument", sa.Text, nullable=False),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("seq", sa.Integer, nullable=False),
        sa.Column("payload", postgresql.JSONB, nullable=False),
        sa.UniqueConstraint("record_type", "instrument", "ts", "seq"),
        schema="trading_ledger",
    )
    op.create_index(
        "ix_records_instrument_ts",
        "records",
        ["instrument", "ts"],
        schema="trading_ledger",
    )


def downgrade() -> None:
    op.drop_index("ix_records_instrument_ts", table_name="records", schema="trading_ledger")
    op.drop_table("records", schema="trading_ledger")

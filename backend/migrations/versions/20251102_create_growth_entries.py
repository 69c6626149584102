"""Create growth_entries table.

Revision ID: 20251102_growth_entries
Revises:
Create Date: 2025-11-02
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20251102_growth_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "growth_entries",
        sa.Column("sequence", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entry_id", sa.String(length=36), nullable=False, unique=True),
        sa.Column(
            "date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("effort", sa.Integer(), nullable=False),
        sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
        sa.CheckConstraint("effort BETWEEN 1 AND 5", name="ck_growth_entries_effort"),
    )
    op.create_index(
        "ix_growth_entries_date_sequence",
        "growth_entries",
        ["date", "sequence"],
    )


def downgrade() -> None:
    op.drop_index("ix_growth_entries_date_sequence", table_name="growth_entries")
    op.drop_table("growth_entries")

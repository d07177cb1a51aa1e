"""create debug_logs

Revision ID: 0001_create_debug_logs
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision = "0001_create_debug_logs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "debug_logs",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("level", sa.String(length=20), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("video_id", sa.String(), nullable=True),
        sa.Column("video_title", sa.Text(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("stack_trace", sa.Text(), nullable=True),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_debug_logs_timestamp", "debug_logs", ["timestamp"], unique=False)
    op.create_index("ix_debug_logs_level", "debug_logs", ["level"], unique=False)
    op.create_index("ix_debug_logs_resolved", "debug_logs", ["resolved"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_debug_logs_resolved", table_name="debug_logs")
    op.drop_index("ix_debug_logs_level", table_name="debug_logs")
    op.drop_index("ix_debug_logs_timestamp", table_name="debug_logs")
    op.drop_table("debug_logs")

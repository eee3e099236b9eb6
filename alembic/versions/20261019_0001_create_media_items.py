"""create media_items and policy_settings tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "media_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("locator", sa.String(length=1024), nullable=False),
        sa.Column("media_type", sa.String(length=10), nullable=False),
        sa.Column("created_at_ms", sa.BigInteger(), nullable=False),
        sa.Column("expires_at_ms", sa.BigInteger(), nullable=False),
        sa.Column("duration_ms", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_media_items"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_media_items_locator", "media_items", ["locator"])
    op.create_index("ix_media_items_expires_at_ms", "media_items", ["expires_at_ms"])
    op.create_index("ix_media_items_created_at_ms_id", "media_items", ["created_at_ms", "id"])

    op.create_table(
        "policy_settings",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("key", name="pk_policy_settings"),
    )


def downgrade() -> None:
    op.drop_table("policy_settings")
    op.drop_index("ix_media_items_created_at_ms_id", table_name="media_items")
    op.drop_index("ix_media_items_expires_at_ms", table_name="media_items")
    op.drop_index("ix_media_items_locator", table_name="media_items")
    op.drop_table("media_items")

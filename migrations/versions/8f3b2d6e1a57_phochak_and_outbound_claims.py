"""phochak and outbound claims

Revision ID: 8f3b2d6e1a57
Revises: 5c1e7a9d2b40
Create Date: 2026-10-19 15:47:03.218590

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f3b2d6e1a57"
down_revision: Union[str, Sequence[str], None] = "5c1e7a9d2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the phochak table and the outbox claim timestamp."""
    op.create_table(
        "phochak",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_phochak_user_post"),
    )
    op.create_index("ix_phochak_post_id", "phochak", ["post_id"])
    with op.batch_alter_table("notification_outbound") as batch_op:
        batch_op.add_column(sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    """Drop the outbox claim timestamp and the phochak table."""
    with op.batch_alter_table("notification_outbound") as batch_op:
        batch_op.drop_column("claimed_at")
    op.drop_index("ix_phochak_post_id", table_name="phochak")
    op.drop_table("phochak")

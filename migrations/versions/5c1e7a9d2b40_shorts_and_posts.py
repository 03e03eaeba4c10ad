"""shorts and posts

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-19 10:12:41.530114

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SHORTS_STATES = ("IN_PROGRESS", "OK", "FAIL")


def upgrade() -> None:
    """Create account, shorts, post, hashtag and notification outbox tables."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("provider", sa.Text(), nullable=False),
        sa.Column("provider_id", sa.Text(), nullable=False),
        sa.Column("nickname", sa.Text(), nullable=False),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("push_token", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider_id"),
    )
    op.create_table(
        "shorts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("upload_key", sa.String(length=255), nullable=False),
        sa.Column("shorts_url", sa.Text(), nullable=False),
        sa.Column("thumbnail_url", sa.Text(), nullable=False),
        sa.Column(
            "state",
            sa.Enum(*SHORTS_STATES, name="shortsstate", native_enum=False, length=20),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shorts_upload_key", "shorts", ["upload_key"], unique=True)
    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "category",
            sa.Enum("TOUR", "RESTAURANT", "CAFE", name="postcategory", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("shorts_id", sa.Integer(), nullable=True),
        sa.Column("view", sa.Integer(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["shorts_id"], ["shorts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("shorts_id"),
    )
    op.create_index("ix_post_user_id", "post", ["user_id"])
    op.create_table(
        "hashtag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_hashtag_post_id", "hashtag", ["post_id"])
    op.create_index("ix_hashtag_tag", "hashtag", ["tag"])
    op.create_table(
        "notification_outbound",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("upload_key", sa.String(length=255), nullable=False),
        sa.Column(
            "state",
            sa.Enum(*SHORTS_STATES, name="shortsstate", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("status", sa.VARCHAR(length=20), nullable=False),
        sa.Column("retry_count", sa.SmallInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notification_outbound_upload_key", "notification_outbound", ["upload_key"]
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_notification_outbound_upload_key", table_name="notification_outbound")
    op.drop_table("notification_outbound")
    op.drop_index("ix_hashtag_tag", table_name="hashtag")
    op.drop_index("ix_hashtag_post_id", table_name="hashtag")
    op.drop_table("hashtag")
    op.drop_index("ix_post_user_id", table_name="post")
    op.drop_table("post")
    op.drop_index("ix_shorts_upload_key", table_name="shorts")
    op.drop_table("shorts")
    op.drop_table("user_account")

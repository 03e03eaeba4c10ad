# src/phochak/models/phochak.py
"""SQLAlchemy model for the phochak reaction a user leaves on a post."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from phochak.db.session import Base
from phochak.db.time import utcnow


class Phochak(Base):
    """One user's phochak on one post."""

    __tablename__ = "phochak"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_phochak_user_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

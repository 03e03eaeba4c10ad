# src/phochak/models/post.py
"""SQLAlchemy models for posts and related attributes."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from phochak.db.session import Base
from phochak.db.time import utcnow
from phochak.models.hashtag import Hashtag
from phochak.models.shorts import Shorts


class PostCategory(str, enum.Enum):
    """Category a post is filed under."""

    TOUR = "TOUR"
    RESTAURANT = "RESTAURANT"
    CAFE = "CAFE"


class Post(Base):
    """A user post, optionally carrying one short video."""

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    category: Mapped[PostCategory] = mapped_column(
        Enum(PostCategory, native_enum=False, length=20),
        nullable=False,
    )
    # Zero-or-one post per Shorts row; the post side owns the link.
    shorts_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("shorts.id"),
        nullable=True,
        unique=True,
    )
    view: Mapped[int] = mapped_column(default=0, nullable=False)
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    shorts: Mapped[Shorts | None] = relationship("Shorts", lazy="joined")
    hashtags: Mapped[list[Hashtag]] = relationship(
        "Hashtag",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Hashtag.id",
    )

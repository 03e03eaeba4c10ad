# src/phochak/models/hashtag.py
"""SQLAlchemy model for post hashtags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from phochak.db.session import Base

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from phochak.models.post import Post


class Hashtag(Base):
    """A single tag attached to a post."""

    __tablename__ = "hashtag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    post: Mapped[Post] = relationship("Post", back_populates="hashtags")

# src/phochak/models/shorts.py
"""SQLAlchemy model for uploaded short-video assets and their encoding lifecycle."""

from __future__ import annotations

import enum

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from phochak.db.session import Base


class ShortsState(str, enum.Enum):
    """Domain-side encoding state of a Shorts asset."""

    IN_PROGRESS = "IN_PROGRESS"
    OK = "OK"
    FAIL = "FAIL"


class EncodingStatus(str, enum.Enum):
    """Status vocabulary reported by the encoding provider's callback.

    Successful jobs report WAITING, RUNNING, COMPLETE; failed jobs report
    WAITING, RUNNING, FAILURE.
    """

    WAITING = "WAITING"
    RUNNING = "RUNNING"
    FAILURE = "FAILURE"
    COMPLETE = "COMPLETE"


class Shorts(Base):
    """A single uploaded video asset keyed by its upload key.

    A row may exist before any post references it (the encoder reported in
    first); the post side owns the association.
    """

    __tablename__ = "shorts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Unique so that concurrent creators for one key collide at insert time.
    upload_key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    shorts_url: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[ShortsState] = mapped_column(
        Enum(ShortsState, native_enum=False, length=20),
        nullable=False,
        default=ShortsState.IN_PROGRESS,
    )

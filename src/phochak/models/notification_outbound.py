# src/phochak/models/notification_outbound.py
"""SQLAlchemy model for queued push notifications."""

from datetime import datetime

from sqlalchemy import VARCHAR, DateTime, Enum, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from phochak.db.session import Base
from phochak.models.shorts import ShortsState

OUTBOUND_STATUS_PENDING = "pending"
OUTBOUND_STATUS_SENDING = "sending"
OUTBOUND_STATUS_SENT = "sent"
OUTBOUND_STATUS_FAILED = "failed"


class NotificationOutbound(Base):
    """Encoding-state notification recorded alongside the state transition.

    Rows are written inside the same transaction as the Shorts update and
    delivered to the push gateway after commit.
    """

    __tablename__ = "notification_outbound"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    upload_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    state: Mapped[ShortsState] = mapped_column(
        Enum(ShortsState, native_enum=False, length=20),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        VARCHAR(20), nullable=False, default=OUTBOUND_STATUS_PENDING
    )  # 'pending', 'sending', 'sent', 'failed'
    retry_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    # Set when a dispatcher claims the row; stale claims are taken over.
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

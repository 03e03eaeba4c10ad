# src/phochak/models/user.py
"""SQLAlchemy model for platform accounts."""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from phochak.db.session import Base


class User(Base):
    """Account provisioned by the external auth provider.

    Rows are created by the login flow; this service only reads them to
    authorise post writes and to address push notifications.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    provider: Mapped[str] = mapped_column(Text, nullable=False, default="KAKAO")
    provider_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    nickname: Mapped[str] = mapped_column(Text, nullable=False)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    # FCM device token; null when the user has not granted push permission.
    push_token: Mapped[str | None] = mapped_column(Text, nullable=True)

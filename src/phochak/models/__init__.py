# src/phochak/models/__init__.py
"""SQLAlchemy models for the Phochak application."""

from .hashtag import Hashtag
from .notification_outbound import NotificationOutbound
from .phochak import Phochak
from .post import Post, PostCategory
from .shorts import EncodingStatus, Shorts, ShortsState
from .user import User

__all__ = [
    "Hashtag",
    "NotificationOutbound",
    "Phochak",
    "Post", "PostCategory",
    "EncodingStatus", "Shorts", "ShortsState",
    "User",
]

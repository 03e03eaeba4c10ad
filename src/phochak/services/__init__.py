# src/phochak/services/__init__.py
"""Business logic services for the Phochak application."""

from .notification import NotificationService
from .notification_dispatch import NotificationDispatchWorker
from .push import PushClient
from .shorts_registry import ShortsRegistry
from .shorts_service import ShortsService

__all__ = [
    "NotificationService",
    "NotificationDispatchWorker",
    "PushClient",
    "ShortsRegistry",
    "ShortsService",
]

# src/phochak/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import posts_router, shorts_router, system_router

__all__ = [
    "posts_router",
    "shorts_router",
    "system_router",
]

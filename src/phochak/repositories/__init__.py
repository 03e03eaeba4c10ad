"""Repositories wrapping SQLAlchemy access per aggregate."""

from .phochak_repo import PhochakRepository
from .post_repo import PostRepository
from .shorts_repo import ShortsRepository

__all__ = ["PhochakRepository", "PostRepository", "ShortsRepository"]

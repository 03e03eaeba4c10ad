"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phochak.core.errors import ConflictError
from phochak.models.hashtag import Hashtag
from phochak.models.post import Post, PostCategory

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a live post by identifier."""
        result = self.session.execute(
            select(Post).where(Post.id == post_id, Post.deleted.is_(False))
        )
        return result.unique().scalars().first()

    def create(self, *, user_id: int, category: PostCategory) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(user_id=user_id, category=category)
        self.session.add(post)
        self.session.flush()
        return post

    def replace_hashtags(self, post: Post, tags: list[str]) -> list[Hashtag]:
        """Replace every hashtag on ``post`` with ``tags``, preserving order."""
        post.hashtags.clear()
        self.session.flush()
        hashtags = [Hashtag(tag=tag) for tag in tags]
        post.hashtags.extend(hashtags)
        self.session.flush()
        return hashtags

    @contextmanager
    def linking_shorts(self, post: Post) -> Iterator[Post]:
        """Stage a Shorts link on ``post`` inside a SAVEPOINT and flush it on exit.

        The SAVEPOINT is opened before the caller mutates the post, so a
        collision on the unique ``post.shorts_id`` only discards the link.

        Raises:
            ConflictError: If the Shorts already belongs to another post.
        """
        savepoint = self.session.begin_nested()
        try:
            yield post
            shorts_id = post.shorts_id
            try:
                self.session.flush()
            except IntegrityError as exc:
                raise ConflictError(
                    f"Shorts {shorts_id} is already linked to another post"
                ) from exc
        except Exception:
            savepoint.rollback()
            raise
        savepoint.commit()

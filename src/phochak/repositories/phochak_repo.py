"""Data access helpers for phochak reactions."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phochak.core.errors import ConflictError
from phochak.models.phochak import Phochak

__all__ = ["PhochakRepository"]


class PhochakRepository:
    """Thin wrapper around database access for phochak reactions."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def exists_by_user_and_post(self, user_id: int, post_id: int) -> bool:
        """Return True if ``user_id`` has already phochaked ``post_id``."""
        result = self.session.execute(
            select(Phochak.id)
            .where(Phochak.user_id == user_id, Phochak.post_id == post_id)
            .limit(1)
        )
        return result.first() is not None

    def count_by_post(self, post_id: int) -> int:
        return self.session.execute(
            select(func.count()).select_from(Phochak).where(Phochak.post_id == post_id)
        ).scalar_one()

    def add(self, *, user_id: int, post_id: int) -> Phochak:
        """Insert a reaction.

        Raises:
            ConflictError: If the user already phochaked the post.
        """
        phochak = Phochak(user_id=user_id, post_id=post_id)
        savepoint = self.session.begin_nested()
        try:
            self.session.add(phochak)
            self.session.flush()
        except IntegrityError as exc:
            savepoint.rollback()
            raise ConflictError(f"User {user_id} already phochaked post {post_id}") from exc
        savepoint.commit()
        return phochak

    def remove(self, *, user_id: int, post_id: int) -> bool:
        """Delete a reaction, returning False if there was none."""
        result = self.session.execute(
            delete(Phochak).where(Phochak.user_id == user_id, Phochak.post_id == post_id)
        )
        return result.rowcount > 0

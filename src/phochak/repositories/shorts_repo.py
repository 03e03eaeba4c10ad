"""Data access helpers for working with Shorts records."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phochak.core.errors import ConflictError, NotFoundError
from phochak.models.shorts import Shorts, ShortsState

__all__ = ["ShortsRepository"]


class ShortsRepository:
    """Thin wrapper around database access for Shorts entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def find_by_upload_key(self, upload_key: str) -> Shorts | None:
        """Return the Shorts registered under an upload key, if any."""
        result = self.session.execute(select(Shorts).where(Shorts.upload_key == upload_key))
        return result.scalars().first()

    def save(self, shorts: Shorts) -> Shorts:
        """Insert a new Shorts row and return the persisted instance.

        The insert runs inside a SAVEPOINT so a unique-key collision only
        discards this row, leaving the caller's transaction usable.

        Raises:
            ConflictError: If a row with the same upload key already exists.
        """
        upload_key = shorts.upload_key
        # Opened before staging the row; pending changes from the caller flush here.
        savepoint = self.session.begin_nested()
        try:
            self.session.add(shorts)
            self.session.flush()
        except IntegrityError as exc:
            savepoint.rollback()
            raise ConflictError(
                f"Shorts already registered for upload key {upload_key!r}"
            ) from exc
        savepoint.commit()
        return shorts

    def update_state(self, upload_key: str, state: ShortsState) -> None:
        """Set the state of the row matching ``upload_key`` in one statement.

        Raises:
            NotFoundError: If no row matches the upload key.
        """
        result = self.session.execute(
            update(Shorts)
            .where(Shorts.upload_key == upload_key)
            .values(state=state)
            .execution_options(synchronize_session="evaluate")
        )
        if result.rowcount == 0:
            raise NotFoundError(upload_key)

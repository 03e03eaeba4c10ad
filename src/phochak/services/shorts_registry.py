"""Lifecycle registry for Shorts records keyed by upload key."""
from __future__ import annotations

import logging

from phochak.core.errors import ConflictError
from phochak.core.settings import Settings, settings as default_settings
from phochak.models.shorts import Shorts, ShortsState
from phochak.repositories.shorts_repo import ShortsRepository

logger = logging.getLogger(__name__)


def generate_shorts_file_name(upload_key: str, config: Settings | None = None) -> str:
    """Return the streaming URL for an upload key."""
    config = config or default_settings
    return (
        config.shorts_streaming_url_prefix_head
        + upload_key
        + config.shorts_streaming_url_prefix_tail
    )


def generate_thumbnails_file_name(upload_key: str, config: Settings | None = None) -> str:
    """Return the thumbnail URL for an upload key."""
    config = config or default_settings
    return config.thumbnail_url_prefix_head + upload_key + config.thumbnail_url_prefix_tail


class ShortsRegistry:
    """Owns creation and state transitions of Shorts records.

    At most one record exists per upload key. Creation relies on the unique
    index on ``shorts.upload_key``: a losing concurrent insert surfaces as
    :class:`ConflictError` and is resolved by reading the winner's row.
    """

    def __init__(self, repo: ShortsRepository, config: Settings | None = None) -> None:
        self.repo = repo
        self.config = config or default_settings

    def find_by_upload_key(self, upload_key: str) -> Shorts | None:
        """Return the record for ``upload_key`` without side effects."""
        return self.repo.find_by_upload_key(upload_key)

    def create_placeholder(self, upload_key: str) -> Shorts:
        """Persist a new in-progress record with URLs derived from the key.

        Raises:
            ConflictError: If a record for the key was inserted concurrently.
        """
        shorts = Shorts(
            upload_key=upload_key,
            shorts_url=generate_shorts_file_name(upload_key, self.config),
            thumbnail_url=generate_thumbnails_file_name(upload_key, self.config),
            state=ShortsState.IN_PROGRESS,
        )
        self.repo.save(shorts)
        logger.info("Registered placeholder shorts for upload key %s", upload_key)
        return shorts

    def find_or_create(self, upload_key: str) -> Shorts:
        """Return the record for ``upload_key``, creating a placeholder if absent."""
        existing = self.repo.find_by_upload_key(upload_key)
        if existing is not None:
            return existing
        try:
            return self.create_placeholder(upload_key)
        except ConflictError:
            winner = self.repo.find_by_upload_key(upload_key)
            if winner is None:
                raise
            logger.info("Concurrent shorts insert for %s resolved by lookup", upload_key)
            return winner

    def update_state(self, upload_key: str, state: ShortsState) -> None:
        """Transition the record for ``upload_key`` to ``state``.

        Raises:
            NotFoundError: If no record exists for the key.
        """
        self.repo.update_state(upload_key, state)
        logger.info("Shorts %s moved to %s", upload_key, state.value)

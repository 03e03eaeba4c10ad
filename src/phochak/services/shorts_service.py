"""Reconciliation of posts with asynchronously encoded Shorts.

A post and its video are produced by two independent triggers: the client
creating the post, and the encoding provider calling back as the upload is
processed. Either may arrive first, so both paths find-or-create the Shorts
record for the upload key and then advance it.

Encoding callbacks arrive in this order:

* success: WAITING -> RUNNING -> COMPLETE
* failure: WAITING -> RUNNING -> FAILURE
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from phochak.core.errors import ParseError
from phochak.core.settings import Settings
from phochak.models.post import Post
from phochak.models.shorts import EncodingStatus, Shorts, ShortsState
from phochak.repositories.shorts_repo import ShortsRepository
from phochak.services.notification import NotificationService
from phochak.services.post_service import attach_shorts
from phochak.services.shorts_registry import ShortsRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodingCallback:
    """Progress report delivered by the encoding provider."""

    file_path: str
    status: str


@dataclass(frozen=True)
class CallbackResult:
    """Outcome of processing one encoding callback.

    ``unrecognized_status`` carries the raw status when the provider sent a
    value outside :class:`EncodingStatus`; nothing was changed in that case.
    """

    upload_key: str
    status: EncodingStatus | None
    state: ShortsState | None = None
    notified: bool = False
    unrecognized_status: str | None = None

    @property
    def recognized(self) -> bool:
        return self.unrecognized_status is None


def extract_upload_key(file_path: str) -> str:
    """Return the upload key embedded in an encoded file path.

    The key is the file name up to its first underscore, e.g.
    ``/videos/abc123_1699999999.mp4`` -> ``abc123``.

    Raises:
        ParseError: If the path has no directory separator, the file name has
            no underscore, or the key would be empty.
    """
    slash = file_path.rfind("/")
    if slash < 0:
        raise ParseError(file_path, "no '/' separator")
    file_name = file_path[slash + 1:]
    underscore = file_name.find("_")
    if underscore < 0:
        raise ParseError(file_path, "no '_' in file name")
    upload_key = file_name[:underscore]
    if not upload_key:
        raise ParseError(file_path, "empty upload key")
    return upload_key


class ShortsService:
    """Drives the Shorts lifecycle from both post and encoder triggers.

    Methods only stage changes on the session; the caller commits. Queued
    notifications are outbox rows in the same transaction.
    """

    def __init__(
        self,
        registry: ShortsRegistry,
        notifications: NotificationService,
    ) -> None:
        self.registry = registry
        self.notifications = notifications

    @classmethod
    def from_session(cls, session: Session, config: Settings | None = None) -> ShortsService:
        """Wire the service against a single database session."""
        return cls(
            ShortsRegistry(ShortsRepository(session), config),
            NotificationService(session),
        )

    def connect_shorts(self, post: Post, upload_key: str) -> Shorts:
        """Link the Shorts for ``upload_key`` to a newly created post.

        If the encoder already registered the key, encoding is treated as
        finished and the record becomes OK. Otherwise an in-progress
        placeholder is created for the encoder to complete later.

        Raises:
            ConflictError: If ``post`` is already linked to another Shorts.
        """
        shorts = self.registry.find_by_upload_key(upload_key)
        if shorts is not None:
            # Encoding finished before the post was created.
            shorts.state = ShortsState.OK
            logger.info("Linked post %s to encoded shorts %s", post.id, upload_key)
        else:
            shorts = self.registry.find_or_create(upload_key)
            logger.info("Linked post %s to pending shorts %s", post.id, upload_key)
        attach_shorts(post, shorts)
        return shorts

    def process_encoding_callback(self, callback: EncodingCallback) -> CallbackResult:
        """Apply one encoding progress report.

        Raises:
            ParseError: If the upload key cannot be extracted from the path.
            NotFoundError: If a terminal status arrives for an unknown key.
        """
        upload_key = extract_upload_key(callback.file_path)
        try:
            status = EncodingStatus(callback.status)
        except ValueError:
            return CallbackResult(
                upload_key=upload_key,
                status=None,
                unrecognized_status=callback.status,
            )

        if status is EncodingStatus.WAITING:
            # The post may not exist yet; register the key so it can attach later.
            self.registry.find_or_create(upload_key)
            state = ShortsState.IN_PROGRESS
        elif status is EncodingStatus.RUNNING:
            return CallbackResult(upload_key=upload_key, status=status)
        elif status is EncodingStatus.FAILURE:
            state = ShortsState.FAIL
            self.registry.update_state(upload_key, state)
        else:
            state = ShortsState.OK
            self.registry.update_state(upload_key, state)

        self.notifications.post_encode_state(upload_key, state)
        return CallbackResult(upload_key=upload_key, status=status, state=state, notified=True)

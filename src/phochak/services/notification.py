"""Notification port used by the Shorts workflow."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from phochak.models.notification_outbound import OUTBOUND_STATUS_PENDING, NotificationOutbound
from phochak.models.shorts import ShortsState

logger = logging.getLogger(__name__)


class NotificationService:
    """Queue encoding-state push notifications in the caller's transaction.

    Nothing is sent here. The row commits or rolls back together with the
    state transition that produced it; delivery is the dispatcher's job.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def post_encode_state(self, upload_key: str, state: ShortsState) -> NotificationOutbound:
        """Record a notification that ``upload_key`` reached ``state``."""
        record = NotificationOutbound(
            upload_key=upload_key,
            state=state,
            status=OUTBOUND_STATUS_PENDING,
            retry_count=0,
        )
        self.session.add(record)
        self.session.flush()
        logger.debug("Queued %s notification for %s", state.value, upload_key)
        return record

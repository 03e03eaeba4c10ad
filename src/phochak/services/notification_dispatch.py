"""Background delivery of queued encoding-state notifications.

Rows written by :class:`phochak.services.notification.NotificationService`
are picked up here after their transaction commits and handed to the push
gateway. Delivery failures are retried on later passes and never reach the
request that produced the notification.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta

from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from phochak.core.settings import settings
from phochak.db.session import SessionLocal
from phochak.db.time import utcnow
from phochak.models import NotificationOutbound, Post, Shorts, User
from phochak.models.notification_outbound import (
    OUTBOUND_STATUS_FAILED,
    OUTBOUND_STATUS_PENDING,
    OUTBOUND_STATUS_SENDING,
    OUTBOUND_STATUS_SENT,
)
from phochak.services.push import (
    EncodeStateMessage,
    PushClient,
    PushDisabledError,
    PushError,
    get_push_client,
)

# Configure logger for this module
logger = logging.getLogger(__name__)


class NotificationDispatchWorker:
    """Periodically delivers pending notifications to the push gateway."""

    def __init__(
        self, client: PushClient | None = None, db_session: Session | None = None
    ) -> None:
        """Initialize the dispatch worker.

        Args:
            client: Optional push client instance. If None, uses the global client.
            db_session: Optional database session. If None, creates new sessions as needed.
        """
        self.client = client or get_push_client()
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._db_session = db_session

    async def start(self) -> None:
        """Start the background dispatch loop."""

        if not self.client.enabled:
            return

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background dispatch loop."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        interval = max(0.1, float(settings.push_dispatch_interval_seconds))

        while not self._stopping.is_set():
            try:
                await self.dispatch_pending()
            except PushDisabledError:
                return
            except (OSError, ConnectionError, TimeoutError) as e:
                logger.warning("NotificationDispatchWorker encountered network error: %s", e)
                await asyncio.sleep(min(interval * 4, 30.0))
                continue

            await asyncio.sleep(interval)

    async def dispatch_pending(self) -> int:
        """Deliver one batch of pending notifications.

        Returns:
            Number of notifications accepted by the gateway in this pass.
        """
        if not self.client.enabled:
            return 0

        if self._db_session:
            return await self._dispatch_with_session(self._db_session)
        with SessionLocal() as db:
            return await self._dispatch_with_session(db)

    async def _dispatch_with_session(self, db: Session) -> int:
        cutoff = utcnow() - timedelta(seconds=settings.push_claim_timeout_seconds)
        candidates = (
            db.execute(
                select(NotificationOutbound)
                .where(self._claimable(cutoff))
                .order_by(NotificationOutbound.id)
                .limit(settings.push_outbound_batch_size)
            )
            .scalars()
            .all()
        )
        logger.debug("Found %d pending notifications", len(candidates))

        delivered = 0
        for record in candidates:
            if not self._claim(db, record, cutoff):
                logger.debug("Notification %s was claimed by another dispatcher", record.id)
                continue

            message = self._build_message(db, record)
            try:
                accepted = await self.client.send_encode_state(
                    message,
                    idempotency_key=f"encode-state-{record.id}",
                )
            except PushDisabledError:
                record.status = OUTBOUND_STATUS_PENDING
                record.claimed_at = None
                db.commit()
                raise
            except PushError as e:
                logger.warning("Push delivery failed for notification %s: %s", record.id, e)
                accepted = False

            record.claimed_at = None
            if accepted:
                record.status = OUTBOUND_STATUS_SENT
                delivered += 1
            else:
                record.retry_count += 1
                record.status = OUTBOUND_STATUS_PENDING
                if record.retry_count >= settings.push_outbound_max_retries:
                    record.status = OUTBOUND_STATUS_FAILED
                    logger.error(
                        "Giving up on %s notification for %s after %d attempts",
                        record.state.value,
                        record.upload_key,
                        record.retry_count,
                    )
            db.commit()

        return delivered

    @staticmethod
    def _claimable(cutoff: datetime) -> ColumnElement[bool]:
        """Rows that are pending, or whose claim is older than ``cutoff``."""
        return or_(
            NotificationOutbound.status == OUTBOUND_STATUS_PENDING,
            and_(
                NotificationOutbound.status == OUTBOUND_STATUS_SENDING,
                NotificationOutbound.claimed_at < cutoff,
            ),
        )

    def _claim(self, db: Session, record: NotificationOutbound, cutoff: datetime) -> bool:
        """Mark ``record`` as being sent by this pass.

        The conditional UPDATE matches no row when another dispatcher got
        there first, so each notification is handed to the gateway once per
        attempt.
        """
        result = db.execute(
            update(NotificationOutbound)
            .where(NotificationOutbound.id == record.id, self._claimable(cutoff))
            .values(status=OUTBOUND_STATUS_SENDING, claimed_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        claimed = result.rowcount > 0
        db.commit()
        if not claimed:
            return False
        db.refresh(record)
        return True

    @staticmethod
    def _build_message(db: Session, record: NotificationOutbound) -> EncodeStateMessage:
        """Address a notification to the author of the post carrying the Shorts."""
        author = db.execute(
            select(User)
            .join(Post, Post.user_id == User.id)
            .join(Shorts, Post.shorts_id == Shorts.id)
            .where(Shorts.upload_key == record.upload_key)
        ).scalars().first()
        return EncodeStateMessage(
            upload_key=record.upload_key,
            state=record.state,
            user_id=author.id if author else None,
            push_token=author.push_token if author else None,
        )

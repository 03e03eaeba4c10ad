# src/phochak/api/v1/endpoints/shorts.py
"""Webhook endpoint receiving the encoding provider's progress callbacks."""

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from phochak.api.v1.dependencies import SessionDep
from phochak.core.errors import NotFoundError, ParseError
from phochak.schemas.shorts import EncodingCallbackRequest, EncodingCallbackResponse
from phochak.services.notification_dispatch import NotificationDispatchWorker
from phochak.services.push import PushError, get_push_client, push_enabled
from phochak.services.shorts_service import EncodingCallback, ShortsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shorts", tags=["shorts"])


async def dispatch_notifications() -> None:
    """Deliver queued notifications right after the callback commits."""
    try:
        await NotificationDispatchWorker(get_push_client()).dispatch_pending()
    except PushError as exc:
        # Left pending; the background worker retries.
        logger.warning("Immediate notification dispatch failed: %s", exc)


@router.post("/encoding-callback", response_model=EncodingCallbackResponse)
async def encoding_callback(
    callback: EncodingCallbackRequest,
    db: SessionDep,
    background_tasks: BackgroundTasks,
) -> EncodingCallbackResponse:
    """Apply an encoding progress report to the matching Shorts record.

    Args:
        callback: File path and status reported by the encoding provider
        db: Database session
        background_tasks: Post-response task queue for notification delivery

    Returns:
        Acknowledgement including the resulting Shorts state

    Raises:
        HTTPException: 400 for a malformed file path, 404 when a terminal
            status references an unknown upload key
    """
    service = ShortsService.from_session(db)
    try:
        result = service.process_encoding_callback(
            EncodingCallback(file_path=callback.file_path, status=callback.status)
        )
        db.commit()
    except ParseError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if not result.recognized:
        logger.error(
            "Undefined encoding callback status %r for upload key %s",
            result.unrecognized_status,
            result.upload_key,
        )
        return EncodingCallbackResponse(
            upload_key=result.upload_key,
            status=callback.status,
            accepted=False,
        )

    if result.notified and push_enabled():
        background_tasks.add_task(dispatch_notifications)

    return EncodingCallbackResponse(
        upload_key=result.upload_key,
        status=callback.status,
        state=result.state.value if result.state else None,
        accepted=True,
    )

"""Operational endpoints for monitoring the Phochak service."""

from __future__ import annotations

import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from phochak.api.v1.dependencies import SessionDep
from phochak.core.settings import settings
from phochak.services.push import get_push_client, push_enabled

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/push/health")
async def get_push_health() -> dict[str, object]:
    """Report push gateway reachability and circuit breaker state.

    Returns:
        Dictionary with push status, circuit breaker state and error details
    """
    if not push_enabled():
        return {
            "status": "disabled",
            "enabled": False,
            "error": "Push delivery is disabled",
        }

    return await get_push_client().health_check()


@router.get("/health")
async def get_system_health(db: SessionDep) -> dict[str, object]:
    """Check the database and the push gateway.

    The service counts as healthy while the database answers; an unreachable
    push gateway only delays notifications.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {e}"

    push_status = "disabled"
    if push_enabled():
        push_health = await get_push_client().health_check()
        push_status = str(push_health.get("status", "unknown"))

    return {
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "timestamp": int(time.time()),
        "components": {
            "database": db_status,
            "push": push_status,
        },
        "version": settings.app_version,
    }

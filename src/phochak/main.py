# src/phochak/main.py
"""Main entry point for the Phochak application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from phochak.api.v1 import posts_router, shorts_router, system_router
from phochak.core.settings import settings
from phochak.services.notification_dispatch import NotificationDispatchWorker
from phochak.services.push import get_push_client, push_enabled

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Phochak API",
    description="Short-video posting platform API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(shorts_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if push_enabled():
        worker = NotificationDispatchWorker(get_push_client())
        await worker.start()
        app.state.notification_worker = worker
    else:
        app.state.notification_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: NotificationDispatchWorker | None = getattr(app.state, "notification_worker", None)
    if worker:
        await worker.stop()
    if push_enabled():
        await get_push_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Phochak API",
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("phochak.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

"""HTTP client for the push gateway that fans encoding-state messages out to devices.

Requests carry a short-lived HS256 service token and an ``Idempotency-Key``
so the gateway can drop duplicates when the dispatcher retries a row. A small
circuit breaker stops hammering the gateway while it is failing.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
from jose import jwt

from phochak.core.settings import settings
from phochak.models.shorts import ShortsState

logger = logging.getLogger(__name__)

ENCODE_STATE_PATH = "/api/push/encode-state"
ACCEPTED_STATUS_CODES = frozenset({200, 201, 202})

# Title and body shown on the device for each state.
ENCODE_STATE_MESSAGES: dict[ShortsState, tuple[str, str]] = {
    ShortsState.IN_PROGRESS: ("Uploading", "Your video is being processed."),
    ShortsState.OK: ("Upload complete", "Your video has been posted."),
    ShortsState.FAIL: ("Upload failed", "We could not process your video. Please try again."),
}


class PushError(RuntimeError):
    """Delivery to the push gateway failed and may be retried."""


class PushDisabledError(PushError):
    """Push delivery is switched off in configuration."""


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Counts consecutive gateway failures and short-circuits calls while open.

    After ``reset_after`` seconds one trial call is let through; its outcome
    closes or re-opens the circuit.
    """

    failure_threshold: int = 5
    reset_after: float = 60.0

    consecutive_failures: int = 0
    opened_at: float | None = field(default=None, repr=False)

    @property
    def state(self) -> CircuitState:
        if self.opened_at is None:
            return CircuitState.CLOSED
        if time.monotonic() - self.opened_at >= self.reset_after:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    def allow_request(self) -> bool:
        return self.state is not CircuitState.OPEN

    def on_success(self) -> None:
        self.consecutive_failures = 0
        self.opened_at = None

    def on_failure(self) -> None:
        was_open = self.opened_at is not None and self.state is CircuitState.OPEN
        trial_failed = self.state is CircuitState.HALF_OPEN
        self.consecutive_failures += 1
        if trial_failed or self.consecutive_failures >= self.failure_threshold:
            self.opened_at = time.monotonic()
            if not was_open:
                logger.warning(
                    "Push circuit opened after %d consecutive failures",
                    self.consecutive_failures,
                )


@dataclass(frozen=True)
class PushConfig:
    """Connection settings for the push gateway."""

    enabled: bool
    base_url: str | None
    service_id: str
    shared_secret: str | None
    audience: str
    token_ttl_seconds: int
    timeout_seconds: float


@dataclass(frozen=True)
class EncodeStateMessage:
    """Notification that the video behind ``upload_key`` reached ``state``.

    ``user_id`` and ``push_token`` are None when no post carries the video
    yet; the gateway drops such messages.
    """

    upload_key: str
    state: ShortsState
    user_id: int | None
    push_token: str | None

    def to_json(self) -> dict[str, Any]:
        title, body = ENCODE_STATE_MESSAGES[self.state]
        return {
            "upload_key": self.upload_key,
            "state": self.state.value,
            "user_id": self.user_id,
            "push_token": self.push_token,
            "title": title,
            "body": body,
        }


def load_push_config() -> PushConfig:
    return PushConfig(
        enabled=settings.push_enabled,
        base_url=settings.push_base_url,
        service_id=settings.push_service_id,
        shared_secret=settings.push_shared_secret,
        audience=settings.push_audience,
        token_ttl_seconds=settings.push_token_ttl_seconds,
        timeout_seconds=float(settings.push_http_timeout_seconds),
    )


class PushClient:
    """Async client for the push gateway.

    The underlying ``httpx.AsyncClient`` is created on first use and shared
    by every call until :meth:`close`.
    """

    def __init__(self, config: PushConfig | None = None) -> None:
        self.config = config or load_push_config()
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()
        self._circuit_breaker = CircuitBreaker()

    @property
    def enabled(self) -> bool:
        return self.config.enabled and bool(self.config.base_url)

    async def _http(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise PushDisabledError("Push delivery is not enabled")
        async with self._lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url or "",
                    timeout=self.config.timeout_seconds,
                )
            return self._client

    def _service_token(self) -> str | None:
        if not self.config.shared_secret:
            return None
        issued_at = int(time.time())
        claims = {
            "iss": self.config.service_id,
            "aud": self.config.audience,
            "iat": issued_at,
            "exp": issued_at + max(1, self.config.token_ttl_seconds),
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(claims, self.config.shared_secret, algorithm="HS256")

    def _headers(self, idempotency_key: str | None) -> dict[str, str]:
        headers = {"X-Phochak-Service-Id": self.config.service_id}
        token = self._service_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    async def _call(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> httpx.Response:
        if not self._circuit_breaker.allow_request():
            raise PushError("Push circuit breaker is open; gateway unavailable")

        http = await self._http()
        try:
            response = await http.request(
                method, path, json=payload, headers=self._headers(idempotency_key)
            )
        except httpx.HTTPError as exc:
            self._circuit_breaker.on_failure()
            raise PushError(f"Push request to {path} failed: {exc}") from exc

        if response.is_server_error:
            self._circuit_breaker.on_failure()
            raise PushError(f"Push gateway answered {response.status_code} for {path}")

        self._circuit_breaker.on_success()
        return response

    async def send_encode_state(
        self,
        message: EncodeStateMessage,
        *,
        idempotency_key: str,
    ) -> bool:
        """Deliver one encoding-state notification.

        Returns:
            True if the gateway accepted the message, False if it rejected it.

        Raises:
            PushDisabledError: If push delivery is disabled.
            PushError: On network failures or gateway 5xx responses.
        """
        if not self.enabled:
            raise PushDisabledError("Push delivery is not enabled")

        response = await self._call(
            "POST",
            ENCODE_STATE_PATH,
            payload=message.to_json(),
            idempotency_key=idempotency_key,
        )
        if response.status_code in ACCEPTED_STATUS_CODES:
            return True
        logger.warning(
            "Push gateway rejected %s notification for %s with %s",
            message.state.value,
            message.upload_key,
            response.status_code,
        )
        return False

    async def health_check(self) -> dict[str, Any]:
        if not self.enabled:
            return {"status": "disabled", "enabled": False}

        report: dict[str, Any] = {"enabled": True}
        try:
            response = await self._call("GET", "/health")
        except PushError as exc:
            report.update(status="error", error=str(exc))
        else:
            report["status"] = "healthy" if response.status_code == 200 else "unhealthy"
        report["circuit_breaker"] = self._circuit_breaker.state.value
        return report

    async def close(self) -> None:
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


_push_client: PushClient | None = None


def get_push_client() -> PushClient:
    """Return the process-wide push client, creating it on first use."""
    global _push_client
    if _push_client is None:
        _push_client = PushClient()
    return _push_client


def push_enabled() -> bool:
    return get_push_client().enabled

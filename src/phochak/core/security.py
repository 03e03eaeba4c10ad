"""JWT helpers for bearer-token authentication."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from phochak.core.settings import settings


def create_access_token(user_id: int, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token for ``user_id``.

    Tokens are normally minted by the login service; this helper exists for
    tooling and tests that need a token accepted by this API.
    """
    to_encode: dict[str, object] = {"sub": str(user_id)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt

# src/phochak/schemas/shorts.py
"""Schemas for the encoding provider's webhook."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EncodingCallbackRequest(BaseModel):
    """Callback body posted by the encoding provider.

    ``status`` is kept as a raw string so unknown values reach the workflow
    instead of failing validation.
    """

    file_path: str = Field(..., alias="filePath", min_length=1)
    status: str = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EncodingCallbackResponse(BaseModel):
    """Acknowledgement returned to the encoding provider."""

    upload_key: str
    status: str
    state: str | None = None
    accepted: bool

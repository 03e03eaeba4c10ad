# src/phochak/schemas/__init__.py
"""Pydantic schemas for request and response bodies."""

from .post import PhochakResponse, PostCreate, PostResponse, PostUpdate, ShortsOut
from .shorts import EncodingCallbackRequest, EncodingCallbackResponse

__all__ = [
    "PhochakResponse",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "ShortsOut",
    "EncodingCallbackRequest",
    "EncodingCallbackResponse",
]

# src/phochak/core/errors.py
"""Exceptions raised by the Shorts workflow."""

from __future__ import annotations


class ShortsError(RuntimeError):
    """Base exception for Shorts registry and workflow failures."""


class NotFoundError(ShortsError):
    """Raised when a state transition targets an upload key with no record."""

    def __init__(self, upload_key: str) -> None:
        super().__init__(f"No shorts registered for upload key {upload_key!r}")
        self.upload_key = upload_key


class ConflictError(ShortsError):
    """Raised when a write collides with an existing record.

    Either a second Shorts row for an already-registered upload key, or an
    attempt to link a post that already carries a different Shorts.
    """


class ParseError(ShortsError):
    """Raised when an encoding callback's file path yields no upload key."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Cannot extract upload key from {file_path!r}: {reason}")
        self.file_path = file_path
        self.reason = reason

"""Tests for Shorts record creation and state transitions."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from phochak.core.errors import ConflictError, NotFoundError
from phochak.models import Shorts, ShortsState
from phochak.repositories.shorts_repo import ShortsRepository
from phochak.services.shorts_registry import (
    ShortsRegistry,
    generate_shorts_file_name,
    generate_thumbnails_file_name,
)


@pytest.fixture
def repo(db_session: Session) -> ShortsRepository:
    return ShortsRepository(db_session)


@pytest.fixture
def registry(repo: ShortsRepository, test_settings) -> ShortsRegistry:
    return ShortsRegistry(repo, test_settings)


def _count_shorts(db_session: Session, upload_key: str) -> int:
    return db_session.execute(
        select(func.count()).select_from(Shorts).where(Shorts.upload_key == upload_key)
    ).scalar_one()


def test_url_helpers_concatenate_templates(test_settings) -> None:
    assert generate_shorts_file_name("abc123", test_settings) == (
        "https://stream.test/hls/abc123/index.m3u8"
    )
    assert generate_thumbnails_file_name("abc123", test_settings) == (
        "https://img.test/thumb/abc123_01.jpg"
    )


def test_url_helpers_are_deterministic(test_settings) -> None:
    first = generate_shorts_file_name("k-1", test_settings)
    assert first == generate_shorts_file_name("k-1", test_settings)
    assert first != generate_shorts_file_name("k-2", test_settings)


def test_find_by_upload_key_missing(registry: ShortsRegistry) -> None:
    assert registry.find_by_upload_key("nope") is None


def test_create_placeholder_is_in_progress(registry: ShortsRegistry, db_session: Session) -> None:
    shorts = registry.create_placeholder("fresh")

    assert shorts.id is not None
    assert shorts.state is ShortsState.IN_PROGRESS
    assert shorts.shorts_url == "https://stream.test/hls/fresh/index.m3u8"
    assert shorts.thumbnail_url == "https://img.test/thumb/fresh_01.jpg"
    assert _count_shorts(db_session, "fresh") == 1


def test_create_placeholder_duplicate_raises_conflict(
    registry: ShortsRegistry, pending_shorts: Shorts, db_session: Session
) -> None:
    with pytest.raises(ConflictError):
        registry.create_placeholder(pending_shorts.upload_key)

    # The failed insert must not poison the surrounding transaction.
    assert _count_shorts(db_session, pending_shorts.upload_key) == 1


def test_find_or_create_is_idempotent(registry: ShortsRegistry, db_session: Session) -> None:
    first = registry.find_or_create("same-key")
    second = registry.find_or_create("same-key")

    assert first.id == second.id
    assert _count_shorts(db_session, "same-key") == 1


def test_find_or_create_returns_existing(
    registry: ShortsRegistry, pending_shorts: Shorts
) -> None:
    assert registry.find_or_create(pending_shorts.upload_key).id == pending_shorts.id


def test_find_or_create_resolves_concurrent_insert(
    mocker, registry: ShortsRegistry, pending_shorts: Shorts, db_session: Session
) -> None:
    """A racing creator's row is returned when our own insert collides."""
    lookup = mocker.patch.object(
        registry.repo, "find_by_upload_key", side_effect=[None, pending_shorts]
    )

    result = registry.find_or_create(pending_shorts.upload_key)

    assert result is pending_shorts
    assert lookup.call_count == 2
    assert _count_shorts(db_session, pending_shorts.upload_key) == 1


def test_find_or_create_reraises_when_winner_missing(
    mocker, registry: ShortsRegistry, pending_shorts: Shorts
) -> None:
    mocker.patch.object(registry.repo, "find_by_upload_key", return_value=None)

    with pytest.raises(ConflictError):
        registry.find_or_create(pending_shorts.upload_key)


def test_update_state_changes_state(
    registry: ShortsRegistry, pending_shorts: Shorts, db_session: Session
) -> None:
    registry.update_state(pending_shorts.upload_key, ShortsState.OK)
    db_session.commit()

    db_session.refresh(pending_shorts)
    assert pending_shorts.state is ShortsState.OK


def test_update_state_unknown_key_raises(registry: ShortsRegistry) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        registry.update_state("ghost", ShortsState.FAIL)

    assert exc_info.value.upload_key == "ghost"

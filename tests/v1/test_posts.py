# tests/v1/test_posts.py
"""Tests for post-related endpoints."""

from fastapi import status
from sqlalchemy import func, select

from phochak.models import Shorts, ShortsState


def _create(client, headers, **overrides):
    payload = {"category": "TOUR", "hashtags": ["seoul", "night"]}
    payload.update(overrides)
    return client.post("/api/v1/posts/", json=payload, headers=headers)


def test_create_post_without_video(client, test_user, auth_token) -> None:
    """Test creating a post with no uploaded video."""
    response = _create(client, auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user_id"] == test_user.id
    assert data["category"] == "TOUR"
    assert data["hashtags"] == ["seoul", "night"]
    assert data["shorts"] is None
    assert data["view"] == 0


def test_create_post_registers_pending_shorts(client, db_session, auth_token) -> None:
    """Test that a post created before encoding gets an in-progress video."""
    response = _create(client, auth_token, upload_key="abc123")

    assert response.status_code == status.HTTP_201_CREATED
    shorts = response.json()["shorts"]
    assert shorts["upload_key"] == "abc123"
    assert shorts["state"] == "IN_PROGRESS"
    assert shorts["shorts_url"].endswith("abc123/index.m3u8")
    assert shorts["thumbnail_url"].endswith("abc123_01.jpg")

    count = db_session.execute(select(func.count()).select_from(Shorts)).scalar_one()
    assert count == 1


def test_create_post_after_encoding_marks_ok(
    client, auth_token, pending_shorts
) -> None:
    """Test that a post for an already-registered upload key finishes it."""
    response = _create(client, auth_token, upload_key=pending_shorts.upload_key)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["shorts"]["state"] == ShortsState.OK.value
    assert response.json()["shorts"]["shorts_url"] == pending_shorts.shorts_url


def test_create_post_reusing_upload_key_conflicts(
    client, auth_token, other_auth_token
) -> None:
    """Test that one video cannot be attached to two posts."""
    first = _create(client, auth_token, upload_key="shared")
    assert first.status_code == status.HTTP_201_CREATED

    second = _create(client, other_auth_token, upload_key="shared")
    assert second.status_code == status.HTTP_409_CONFLICT


def test_create_post_requires_auth(client) -> None:
    """Test that creating a post without a token is refused."""
    response = _create(client, {})
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_create_post_invalid_category(client, auth_token) -> None:
    response = _create(client, auth_token, category="BEACH")
    assert response.status_code == 422


def test_create_post_hashtag_too_long(client, auth_token) -> None:
    response = _create(client, auth_token, hashtags=["x" * 21])
    assert response.status_code == 422


def test_get_post(client, auth_token) -> None:
    """Test fetching a post by id."""
    created = _create(client, auth_token, upload_key="abc123").json()

    response = client.get(f"/api/v1/posts/{created['id']}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == created["id"]
    assert response.json()["shorts"]["upload_key"] == "abc123"


def test_get_post_not_found(client) -> None:
    response = client.get("/api/v1/posts/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Post not found"


def test_update_post(client, auth_token, test_post) -> None:
    """Test replacing category and hashtags on an owned post."""
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json={"category": "RESTAURANT", "hashtags": ["noodles"]},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["category"] == "RESTAURANT"
    assert response.json()["hashtags"] == ["noodles"]


def test_update_post_by_other_user_forbidden(client, other_auth_token, test_post) -> None:
    response = client.put(
        f"/api/v1/posts/{test_post.id}",
        json={"category": "RESTAURANT", "hashtags": []},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_post_not_found(client, auth_token) -> None:
    response = client.put(
        "/api/v1/posts/99999",
        json={"category": "CAFE", "hashtags": []},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_phochak_post(client, auth_token, test_post) -> None:
    """Test leaving a phochak and seeing it in the post's total."""
    response = client.post(f"/api/v1/posts/{test_post.id}/phochak", headers=auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"post_id": test_post.id, "phochaked": True, "phochaks": 1}

    fetched = client.get(f"/api/v1/posts/{test_post.id}")
    assert fetched.json()["phochaks"] == 1


def test_phochak_post_twice_conflicts(client, auth_token, other_auth_token, test_post) -> None:
    url = f"/api/v1/posts/{test_post.id}/phochak"
    assert client.post(url, headers=auth_token).status_code == status.HTTP_201_CREATED

    response = client.post(url, headers=auth_token)
    assert response.status_code == status.HTTP_409_CONFLICT

    # Another user can still phochak the same post.
    response = client.post(url, headers=other_auth_token)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["phochaks"] == 2


def test_phochak_post_not_found(client, auth_token) -> None:
    response = client.post("/api/v1/posts/99999/phochak", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Post not found"


def test_phochak_requires_auth(client, test_post) -> None:
    response = client.post(f"/api/v1/posts/{test_post.id}/phochak")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_cancel_phochak(client, auth_token, test_post) -> None:
    """Test withdrawing a phochak."""
    url = f"/api/v1/posts/{test_post.id}/phochak"
    client.post(url, headers=auth_token)

    response = client.delete(url, headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"post_id": test_post.id, "phochaked": False, "phochaks": 0}

    response = client.delete(url, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Phochak not found"

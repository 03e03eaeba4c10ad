"""Service-level helpers for creating and updating posts."""
from __future__ import annotations

from typing import TYPE_CHECKING

from phochak.core.errors import ConflictError
from phochak.models.post import Post, PostCategory
from phochak.models.shorts import Shorts
from phochak.repositories.phochak_repo import PhochakRepository
from phochak.repositories.post_repo import PostRepository
from phochak.schemas.post import PostResponse, ShortsOut

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from phochak.services.shorts_service import ShortsService


class PostPermissionError(PermissionError):
    """Raised when a user modifies a post they do not own."""


def attach_shorts(post: Post, shorts: Shorts) -> Post:
    """Associate ``shorts`` with ``post`` in place and return the post.

    Raises:
        ConflictError: If the post already carries a different Shorts.
    """
    if post.shorts_id is not None and post.shorts_id != shorts.id:
        raise ConflictError(f"Post {post.id} is already linked to shorts {post.shorts_id}")
    post.shorts = shorts
    post.shorts_id = shorts.id
    return post


def create_post(
    *,
    repo: PostRepository,
    shorts_service: ShortsService,
    user_id: int,
    category: PostCategory,
    hashtags: list[str],
    upload_key: str | None,
) -> Post:
    """Create a post, its hashtags, and link its video if one was uploaded.

    Args:
        repo: Repository used to persist the post.
        shorts_service: Workflow that links the uploaded video.
        user_id: Author of the post.
        category: Category the post is filed under.
        hashtags: Already tokenised hashtags.
        upload_key: Key assigned to the uploaded video, or None for no video.

    Returns:
        The flushed (uncommitted) post.
    """
    post = repo.create(user_id=user_id, category=category)
    repo.replace_hashtags(post, hashtags)
    if upload_key:
        with repo.linking_shorts(post):
            shorts_service.connect_shorts(post, upload_key)
    return post


def update_post(
    *,
    repo: PostRepository,
    post: Post,
    user_id: int,
    category: PostCategory,
    hashtags: list[str],
) -> Post:
    """Replace the category and hashtags of a post owned by ``user_id``.

    Raises:
        PostPermissionError: If the user is not the author.
    """
    if post.user_id != user_id:
        raise PostPermissionError("You can only update your own posts")
    post.category = category
    repo.replace_hashtags(post, hashtags)
    return post


def phochak_post(*, repo: PhochakRepository, post: Post, user_id: int) -> int:
    """Record ``user_id``'s phochak on ``post`` and return the new total.

    Raises:
        ConflictError: If the user already phochaked the post.
    """
    if repo.exists_by_user_and_post(user_id, post.id):
        raise ConflictError(f"User {user_id} already phochaked post {post.id}")
    repo.add(user_id=user_id, post_id=post.id)
    return repo.count_by_post(post.id)


def cancel_phochak(*, repo: PhochakRepository, post: Post, user_id: int) -> int | None:
    """Withdraw a phochak; returns the new total, or None if there was none."""
    if not repo.remove(user_id=user_id, post_id=post.id):
        return None
    return repo.count_by_post(post.id)


def to_post_response(post: Post, phochaks: int = 0) -> PostResponse:
    """Convert a Post ORM instance to an API schema."""
    shorts = post.shorts
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        category=post.category,
        view=post.view,
        hashtags=[hashtag.tag for hashtag in post.hashtags],
        shorts=ShortsOut.model_validate(shorts) if shorts is not None else None,
        phochaks=phochaks,
        created_at=post.created_at,
    )

# src/phochak/api/v1/endpoints/posts.py
"""Post-related endpoints for the Phochak API."""

import logging

from fastapi import APIRouter, HTTPException, status

from phochak.api.v1.dependencies import CurrentUserDep, SessionDep
from phochak.core.errors import ConflictError
from phochak.repositories.phochak_repo import PhochakRepository
from phochak.repositories.post_repo import PostRepository
from phochak.schemas.post import PhochakResponse, PostCreate, PostResponse, PostUpdate
from phochak.services.post_service import (
    PostPermissionError,
    cancel_phochak,
    create_post,
    phochak_post,
    to_post_response,
    update_post,
)
from phochak.services.shorts_service import ShortsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Create a new post, linking its uploaded video when an upload key is given.

    Args:
        post_data: Category, hashtags and optional upload key
        current_user: Authenticated author
        db: Database session

    Returns:
        The created post including its Shorts state

    Raises:
        HTTPException: If the upload key is already linked to another post
    """
    repo = PostRepository(db)
    try:
        post = create_post(
            repo=repo,
            shorts_service=ShortsService.from_session(db),
            user_id=current_user.id,
            category=post_data.category,
            hashtags=post_data.hashtags,
            upload_key=post_data.upload_key,
        )
        db.commit()
    except ConflictError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    db.refresh(post)
    return to_post_response(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep) -> PostResponse:
    """Get a specific post by ID.

    Raises:
        HTTPException: If post not found or deleted
    """
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return to_post_response(post, PhochakRepository(db).count_by_post(post.id))


@router.put("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Replace the category and hashtags of a post.

    Raises:
        HTTPException: If post not found or the user is not the author
    """
    repo = PostRepository(db)
    post = repo.get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    try:
        update_post(
            repo=repo,
            post=post,
            user_id=current_user.id,
            category=post_data.category,
            hashtags=post_data.hashtags,
        )
    except PostPermissionError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc

    db.commit()
    db.refresh(post)
    return to_post_response(post, PhochakRepository(db).count_by_post(post.id))


@router.post(
    "/{post_id}/phochak",
    response_model=PhochakResponse,
    status_code=status.HTTP_201_CREATED,
)
async def phochak_post_endpoint(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PhochakResponse:
    """Leave a phochak on a post.

    Raises:
        HTTPException: 404 if the post is missing, 409 if already phochaked
    """
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    try:
        total = phochak_post(repo=PhochakRepository(db), post=post, user_id=current_user.id)
    except ConflictError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    db.commit()
    return PhochakResponse(post_id=post_id, phochaked=True, phochaks=total)


@router.delete("/{post_id}/phochak", response_model=PhochakResponse)
async def cancel_phochak_endpoint(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PhochakResponse:
    """Withdraw the caller's phochak from a post."""
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    total = cancel_phochak(repo=PhochakRepository(db), post=post, user_id=current_user.id)
    if total is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Phochak not found")

    db.commit()
    return PhochakResponse(post_id=post_id, phochaked=False, phochaks=total)

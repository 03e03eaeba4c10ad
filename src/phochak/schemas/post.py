# src/phochak/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from phochak.models.post import PostCategory
from phochak.models.shorts import ShortsState

MAX_HASHTAGS = 30
MAX_HASHTAG_LENGTH = 20

HashtagStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_HASHTAG_LENGTH)
]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    category: PostCategory = Field(..., description="TOUR / RESTAURANT / CAFE")
    hashtags: list[HashtagStr] = Field(
        default_factory=list,
        max_length=MAX_HASHTAGS,
        description="Already tokenised hashtags",
    )
    upload_key: str | None = Field(
        None,
        min_length=1,
        max_length=255,
        description="Key of the uploaded video; omit for posts without video",
    )


class PostUpdate(BaseModel):
    """Schema for replacing a post's category and hashtags."""

    category: PostCategory
    hashtags: list[HashtagStr] = Field(default_factory=list, max_length=MAX_HASHTAGS)


class ShortsOut(BaseModel):
    """Shorts information embedded in post responses."""

    upload_key: str
    shorts_url: str
    thumbnail_url: str
    state: ShortsState

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    category: PostCategory
    view: int
    hashtags: list[str]
    shorts: ShortsOut | None
    phochaks: int = 0
    created_at: datetime


class PhochakResponse(BaseModel):
    """Result of adding or withdrawing a phochak."""

    post_id: int
    phochaked: bool
    phochaks: int

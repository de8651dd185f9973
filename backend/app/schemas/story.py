"""
StoryShare Backend — Story and Interaction Schemas
====================================================

What:  Payloads for story creation, list/detail views, likes and comments.

Shape summary:
    StoryResponse           — story + author + category names (list, create, like)
    StoryWithComments       — StoryResponse + comments newest-first (comment result)
    StoryDetailResponse     — StoryWithComments + publishedDate (detail view)
    CommentResultResponse   — {comment, story} returned after commenting
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.schemas.common import ApiModel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StoryCreateRequest(ApiModel):
    title: Optional[str] = None
    preview: Optional[str] = None
    content: Optional[str] = None
    categories: Optional[List[str]] = Field(
        default=None,
        description="Category names; unknown names are created on first use",
    )


class CommentCreateRequest(ApiModel):
    content: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthorResponse(ApiModel):
    """Public identity of a user: never includes email or password."""
    id: uuid.UUID
    name: str
    username: str


class CommentResponse(ApiModel):
    id: uuid.UUID
    content: str
    created_at: datetime
    story_id: uuid.UUID
    user_id: uuid.UUID
    user: AuthorResponse


class StoryResponse(ApiModel):
    id: uuid.UUID
    title: str
    preview: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    likes_count: int
    comments_count: int
    author_id: uuid.UUID
    author: AuthorResponse
    categories: List[str] = Field(default_factory=list)

    @field_validator("categories", mode="before")
    @classmethod
    def category_names(cls, v: Any) -> List[str]:
        """Accepts Category rows or plain names."""
        if v is None:
            return []
        return [getattr(item, "name", item) for item in v]


class StoryWithComments(StoryResponse):
    comments: List[CommentResponse] = Field(default_factory=list)


class StoryDetailResponse(StoryWithComments):
    """
    Full story view.

    publishedDate is derived: stories are published the moment they are
    created, so it always equals createdAt.
    """
    published_date: datetime


class CommentResultResponse(ApiModel):
    comment: CommentResponse
    story: StoryWithComments

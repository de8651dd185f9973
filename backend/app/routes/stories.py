"""
StoryShare Backend — Story Route Handlers
===========================================

What:  Story create/list/detail plus the like and comment actions.
Who:   Called by the frontend story feed, detail dialog and editor.

Route Inventory:
    POST /api/stories                   (session) create a story
    GET  /api/stories                   list newest-first, no comments
    GET  /api/stories/{id}              detail with comments and publishedDate
    POST /api/stories/{id}/like         (session) like once
    POST /api/stories/{id}/comment      (session) comment
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import require_session_user
from app.schemas.auth import SessionUser
from app.schemas.common import ErrorResponse
from app.schemas.story import (
    CommentCreateRequest,
    CommentResultResponse,
    StoryCreateRequest,
    StoryDetailResponse,
    StoryResponse,
)
from app.services.interaction_service import interaction_service
from app.services.story_service import story_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stories", tags=["Stories"])


@router.post(
    "",
    response_model=StoryResponse,
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        401: {"description": "No session", "model": ErrorResponse},
        404: {"description": "Session user not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a story",
)
async def create_story(
    payload: StoryCreateRequest,
    session_user: SessionUser = Depends(require_session_user),
    db: AsyncSession = Depends(get_db_session),
) -> StoryResponse:
    return await story_service.create_story(db, session_user, payload)


@router.get(
    "",
    response_model=List[StoryResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all stories, newest first",
)
async def list_stories(db: AsyncSession = Depends(get_db_session)) -> List[StoryResponse]:
    return await story_service.list_stories(db)


@router.get(
    "/{story_id}",
    response_model=StoryDetailResponse,
    responses={
        404: {"description": "Story not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a story with its comments",
)
async def get_story(
    story_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> StoryDetailResponse:
    return await story_service.get_story(db, story_id)


@router.post(
    "/{story_id}/like",
    response_model=StoryResponse,
    responses={
        400: {"description": "Already liked, or session without email", "model": ErrorResponse},
        401: {"description": "No session", "model": ErrorResponse},
        404: {"description": "User or story not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Like a story",
)
async def like_story(
    story_id: str,
    session_user: SessionUser = Depends(require_session_user),
    db: AsyncSession = Depends(get_db_session),
) -> StoryResponse:
    return await interaction_service.like_story(db, session_user, story_id)


@router.post(
    "/{story_id}/comment",
    response_model=CommentResultResponse,
    responses={
        400: {"description": "Empty comment, or session without email", "model": ErrorResponse},
        401: {"description": "No session", "model": ErrorResponse},
        404: {"description": "User or story not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Comment on a story",
)
async def comment_on_story(
    story_id: str,
    payload: CommentCreateRequest,
    session_user: SessionUser = Depends(require_session_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResultResponse:
    return await interaction_service.comment_on_story(db, session_user, story_id, payload)

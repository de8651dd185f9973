"""
StoryShare Backend — Interaction Service (Likes & Comments)
=============================================================

What:  Like and comment operations on stories.
How:   Read-check first (session, user, story, duplicate like), then a single
       transaction that pairs the child-row insert with an atomic counter
       increment on the story:

           INSERT INTO likes (...)                                   ┐ one
           UPDATE stories SET likes_count = likes_count + 1 WHERE id ┘ commit

       Either both writes commit or both roll back, so
       likes_count == count(likes) and comments_count == count(comments)
       hold after every request.

Concurrency:
    Two simultaneous likes by the same user can both pass the read-check.
    The UNIQUE (user_id, story_id) constraint rejects the second insert;
    its transaction rolls back (counter untouched) and the caller gets the
    same ConflictError as the sequential case. No locks, no retries.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.exceptions import (
    AuthError,
    ConflictError,
    DatabaseError,
    StoryShareError,
    ValidationError,
)
from app.models.interaction import Comment, Like
from app.models.story import Story
from app.models.user import User
from app.schemas.auth import SessionUser
from app.schemas.story import (
    CommentCreateRequest,
    CommentResponse,
    CommentResultResponse,
    StoryResponse,
)
from app.services.auth_service import auth_service
from app.services.story_service import (
    build_story_with_comments,
    parse_story_id,
    story_service,
)

logger = logging.getLogger(__name__)

ALREADY_LIKED = "You have already liked this story"


class InteractionService:
    """
    Business logic for likes and comments.

    Both operations are stateless; every call works entirely inside the
    request's own session and transaction.
    """

    async def _resolve_actor(
        self, db: AsyncSession, session_user: Optional[SessionUser]
    ) -> User:
        if session_user is None:
            raise AuthError()
        if not session_user.email:
            raise ValidationError(message="User email not found")
        return await auth_service.resolve_user(db, session_user.email)

    async def like_story(
        self,
        db: AsyncSession,
        session_user: Optional[SessionUser],
        story_id: str,
    ) -> StoryResponse:
        """
        Like a story once per user.

        Returns:
            The story with its incremented likesCount and author.

        Raises:
            AuthError: no session
            ValidationError: session without email
            NotFoundError: user or story missing
            ConflictError: the user already liked this story
        """
        sid = parse_story_id(story_id)
        user = await self._resolve_actor(db, session_user)
        # rollback expires ORM state; keep a plain copy for after it
        user_id = user.id

        try:
            await story_service.ensure_story_exists(db, sid)

            existing = await self._find_like(db, user_id, sid)
            if existing is not None:
                raise ConflictError(message=ALREADY_LIKED)

            db.add(Like(user_id=user_id, story_id=sid))
            await db.flush()
            await db.execute(
                update(Story)
                .where(Story.id == sid)
                .values(likes_count=Story.likes_count + 1)
            )
            await db.commit()

        except StoryShareError:
            raise
        except IntegrityError:
            # Lost the race against a concurrent like by the same user
            await db.rollback()
            logger.info("Duplicate like rejected by constraint: user=%s story=%s", user_id, sid)
            raise ConflictError(message=ALREADY_LIKED)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error liking story %s: %s", sid, str(e), exc_info=True)
            raise DatabaseError(context={"story_id": str(sid)})

        logger.info("Story %s liked by %s", sid, user_id)
        story = await story_service.load_story(db, sid)
        return StoryResponse.model_validate(story)

    async def comment_on_story(
        self,
        db: AsyncSession,
        session_user: Optional[SessionUser],
        story_id: str,
        payload: CommentCreateRequest,
    ) -> CommentResultResponse:
        """
        Add a comment and bump the story's commentsCount.

        Returns:
            {comment, story}; the story carries only its most recent comments
            (settings.comment_preview_limit). Every comment stays stored.
        """
        if session_user is None:
            raise AuthError()

        # Checked before any read or write
        content = payload.content
        if not content or not content.strip():
            raise ValidationError(message="Comment content is required", field="content")

        sid = parse_story_id(story_id)
        user = await self._resolve_actor(db, session_user)
        user_id = user.id

        try:
            await story_service.ensure_story_exists(db, sid)

            comment = Comment(content=content, user_id=user_id, story_id=sid)
            db.add(comment)
            await db.flush()
            await db.execute(
                update(Story)
                .where(Story.id == sid)
                .values(comments_count=Story.comments_count + 1)
            )
            await db.commit()

        except StoryShareError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error commenting on story %s: %s", sid, str(e), exc_info=True)
            raise DatabaseError(context={"story_id": str(sid)})

        logger.info("Comment %s added to story %s by %s", comment.id, sid, user_id)

        story = await story_service.load_story(db, sid)
        recent = await story_service.recent_comments(
            db, sid, limit=settings.comment_preview_limit
        )
        created = await self._load_comment(db, comment.id)

        return CommentResultResponse(
            comment=CommentResponse.model_validate(created),
            story=build_story_with_comments(story, recent),
        )

    async def _find_like(
        self, db: AsyncSession, user_id: uuid.UUID, story_id: uuid.UUID
    ) -> Optional[Like]:
        result = await db.execute(
            select(Like).where(Like.user_id == user_id, Like.story_id == story_id)
        )
        return result.scalar_one_or_none()

    async def _load_comment(self, db: AsyncSession, comment_id: uuid.UUID) -> Comment:
        result = await db.execute(
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.id == comment_id)
        )
        return result.scalar_one()


# ── Singleton Instance ────────────────────────────────────────────────────
interaction_service = InteractionService()

"""
StoryShare Backend — Story Service
====================================

What:  Create, list and fetch stories; find-or-create categories.
How:   Each read eagerly loads exactly the relationships its response needs
       (selectinload), since lazy loads are not available on async sessions.
Who:   Called by the /api/stories routes and reused by InteractionService.

Find-or-create categories:
    INSERT INTO categories (id, name) VALUES ... ON CONFLICT (name) DO NOTHING
    SELECT * FROM categories WHERE name IN (...)
    The insert is idempotent on name, so two stories created at the same
    moment with a brand-new category both end up linked to the same row.
"""

import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    AuthError,
    DatabaseError,
    NotFoundError,
    StoryShareError,
    ValidationError,
)
from app.models.interaction import Comment
from app.models.story import Category, Story
from app.schemas.auth import SessionUser
from app.schemas.story import (
    CommentResponse,
    StoryCreateRequest,
    StoryDetailResponse,
    StoryResponse,
    StoryWithComments,
)
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)


def parse_story_id(story_id: str) -> uuid.UUID:
    """Malformed ids cannot name a story, so they are reported as not found."""
    try:
        return uuid.UUID(str(story_id))
    except ValueError:
        raise NotFoundError(resource="story", resource_id=str(story_id))


def normalize_category_names(names: Optional[Iterable[str]]) -> List[str]:
    """Strip names, drop blanks, collapse duplicates (first occurrence wins)."""
    seen = []
    for name in names or []:
        if not isinstance(name, str):
            continue
        cleaned = name.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def build_story_with_comments(story: Story, comments: List[Comment]) -> StoryWithComments:
    base = StoryResponse.model_validate(story)
    return StoryWithComments(
        **base.model_dump(),
        comments=[CommentResponse.model_validate(c) for c in comments],
    )


class StoryService:
    """
    Business logic for stories.

    Responsibilities:
        - create_story(): authenticated create with category find-or-create
        - list_stories(): every story newest-first, no comments
        - get_story(): detail view with all comments and publishedDate
    """

    async def create_story(
        self,
        db: AsyncSession,
        session_user: Optional[SessionUser],
        payload: StoryCreateRequest,
    ) -> StoryResponse:
        """
        Create a story authored by the session user.

        Raises:
            AuthError: no session, or session carries no email
            NotFoundError: session email no longer maps to a user
            ValidationError: title, preview or content missing
        """
        if session_user is None or not session_user.email:
            raise AuthError()

        if not (payload.title and payload.preview and payload.content):
            raise ValidationError(message="Missing required fields")

        author = await auth_service.resolve_user(db, session_user.email)
        names = normalize_category_names(payload.categories)

        try:
            categories = await self.find_or_create_categories(db, names)
            story = Story(
                title=payload.title,
                preview=payload.preview,
                content=payload.content,
                author_id=author.id,
                categories=categories,
            )
            db.add(story)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error creating story: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info(
            "Story %s created by %s with %d categories", story.id, author.id, len(categories)
        )
        created = await self.load_story(db, story.id)
        return StoryResponse.model_validate(created)

    async def find_or_create_categories(
        self, db: AsyncSession, names: List[str]
    ) -> List[Category]:
        """Idempotent upsert by unique name, then return the rows in request order."""
        if not names:
            return []

        dialect = db.bind.dialect.name
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:
            raise DatabaseError(context={"unsupported_dialect": dialect})

        stmt = (
            insert(Category)
            .values([{"id": uuid.uuid4(), "name": name} for name in names])
            .on_conflict_do_nothing(index_elements=["name"])
        )
        await db.execute(stmt)

        result = await db.execute(select(Category).where(Category.name.in_(names)))
        by_name = {category.name: category for category in result.scalars().all()}
        return [by_name[name] for name in names]

    async def list_stories(self, db: AsyncSession) -> List[StoryResponse]:
        try:
            result = await db.execute(
                select(Story)
                .options(selectinload(Story.author), selectinload(Story.categories))
                .order_by(Story.created_at.desc())
            )
            stories = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error fetching stories: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        return [StoryResponse.model_validate(story) for story in stories]

    async def get_story(self, db: AsyncSession, story_id: str) -> StoryDetailResponse:
        """
        Detail view: author, every comment newest-first, category names and
        a publishedDate equal to createdAt.
        """
        sid = parse_story_id(story_id)
        try:
            story = await self.load_story(db, sid)
            comments = await self.recent_comments(db, sid)
        except StoryShareError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error fetching story %s: %s", sid, str(e), exc_info=True)
            raise DatabaseError(context={"story_id": str(sid)})

        payload = build_story_with_comments(story, comments)
        return StoryDetailResponse(
            **payload.model_dump(),
            published_date=story.created_at,
        )

    # ── Shared loaders (also used by InteractionService) ──────────────────

    async def load_story(self, db: AsyncSession, story_id: uuid.UUID) -> Story:
        """Fetch a story with author and categories, bypassing stale identity-map state."""
        result = await db.execute(
            select(Story)
            .options(selectinload(Story.author), selectinload(Story.categories))
            .where(Story.id == story_id)
            .execution_options(populate_existing=True)
        )
        story = result.scalar_one_or_none()
        if story is None:
            raise NotFoundError(resource="story", resource_id=str(story_id))
        return story

    async def ensure_story_exists(self, db: AsyncSession, story_id: uuid.UUID) -> None:
        result = await db.execute(select(Story.id).where(Story.id == story_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="story", resource_id=str(story_id))

    async def recent_comments(
        self,
        db: AsyncSession,
        story_id: uuid.UUID,
        limit: Optional[int] = None,
    ) -> List[Comment]:
        """Comments for a story, newest first, with commenter loaded."""
        query = (
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.story_id == story_id)
            .order_by(Comment.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())


# ── Singleton Instance ────────────────────────────────────────────────────
story_service = StoryService()

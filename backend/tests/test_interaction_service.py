"""
StoryShare Backend — Interaction Service Unit Tests
=====================================================

What:  Tests for likes and comments, including the counter invariants.
How:   Guard clauses and rollback paths use a mocked session; the counter
       invariants run end-to-end against the SQLite test database.

Test Categories:
    1. Guards (no session, session without email, empty comment)
    2. Likes (once per user, counter equals row count, constraint race)
    3. Comments (counter, preview limit, full list on detail)
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.exceptions import (
    AuthError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from app.models.interaction import Comment, Like
from app.models.story import Story
from app.schemas.auth import SessionUser
from app.schemas.story import CommentCreateRequest, StoryCreateRequest
from app.services.auth_service import auth_service
from app.services.interaction_service import (
    ALREADY_LIKED,
    InteractionService,
    interaction_service,
)
from app.services.story_service import story_service


async def _publish(db, author: SessionUser, title: str = "T"):
    return await story_service.create_story(
        db, author, StoryCreateRequest(title=title, preview="P", content="C")
    )


async def _count(db, model, story_id) -> int:
    result = await db.execute(
        select(func.count()).select_from(model).where(model.story_id == story_id)
    )
    return result.scalar_one()


async def _stored_story(db, story_id) -> Story:
    result = await db.execute(
        select(Story).where(Story.id == story_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


# ══════════════════════════════════════════════════════════════════════════
# Guards
# ══════════════════════════════════════════════════════════════════════════


class TestGuards:

    @pytest.mark.asyncio
    async def test_like_without_session(self, mock_db_session):
        with pytest.raises(AuthError):
            await InteractionService().like_story(mock_db_session, None, str(uuid.uuid4()))
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_like_session_without_email(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await InteractionService().like_story(
                mock_db_session, SessionUser(id="u1"), str(uuid.uuid4())
            )
        assert exc_info.value.message == "User email not found"

    @pytest.mark.asyncio
    async def test_like_malformed_story_id(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await InteractionService().like_story(
                mock_db_session, SessionUser(id="u1", email="a@x.com"), "nope"
            )

    @pytest.mark.asyncio
    async def test_comment_without_session(self, mock_db_session):
        with pytest.raises(AuthError):
            await InteractionService().comment_on_story(
                mock_db_session, None, str(uuid.uuid4()), CommentCreateRequest(content="hi")
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_comment_rejected_before_any_query(self, mock_db_session, content):
        with pytest.raises(ValidationError) as exc_info:
            await InteractionService().comment_on_story(
                mock_db_session,
                SessionUser(id="u1", email="a@x.com"),
                str(uuid.uuid4()),
                CommentCreateRequest(content=content),
            )

        assert exc_info.value.message == "Comment content is required"
        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()


# ══════════════════════════════════════════════════════════════════════════
# Rollback paths (mocked persistence)
# ══════════════════════════════════════════════════════════════════════════


class TestLikeRollback:

    @pytest.fixture
    def actor(self):
        user = MagicMock()
        user.id = uuid.uuid4()
        return user

    @pytest.mark.asyncio
    async def test_constraint_violation_becomes_conflict(self, mock_db_session, actor):
        no_like = MagicMock()
        no_like.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = no_like
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO likes", {}, Exception("UNIQUE constraint failed")
        )

        with patch.object(auth_service, "resolve_user", AsyncMock(return_value=actor)), \
             patch.object(story_service, "ensure_story_exists", AsyncMock()):
            with pytest.raises(ConflictError) as exc_info:
                await InteractionService().like_story(
                    mock_db_session, SessionUser(id="u1", email="a@x.com"), str(uuid.uuid4())
                )

        assert exc_info.value.message == ALREADY_LIKED
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_conflict_does_not_read_user_after_rollback(self, mock_db_session):
        class ExpiringUser:
            """Mimics an ORM row: attribute reads fail once the session rolled back."""
            expired = False
            _id = uuid.uuid4()

            @property
            def id(self):
                if self.expired:
                    raise AssertionError("user.id read after rollback")
                return self._id

        user = ExpiringUser()

        async def rollback():
            user.expired = True

        no_like = MagicMock()
        no_like.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = no_like
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO likes", {}, Exception("UNIQUE constraint failed")
        )
        mock_db_session.rollback.side_effect = rollback

        with patch.object(auth_service, "resolve_user", AsyncMock(return_value=user)), \
             patch.object(story_service, "ensure_story_exists", AsyncMock()):
            with pytest.raises(ConflictError):
                await InteractionService().like_story(
                    mock_db_session, SessionUser(id="u1", email="a@x.com"), str(uuid.uuid4())
                )

        assert user.expired

    @pytest.mark.asyncio
    async def test_other_database_errors_become_500(self, mock_db_session, actor):
        no_like = MagicMock()
        no_like.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = no_like
        mock_db_session.commit.side_effect = OperationalError(
            "COMMIT", {}, Exception("database is locked")
        )

        with patch.object(auth_service, "resolve_user", AsyncMock(return_value=actor)), \
             patch.object(story_service, "ensure_story_exists", AsyncMock()):
            with pytest.raises(DatabaseError):
                await InteractionService().like_story(
                    mock_db_session, SessionUser(id="u1", email="a@x.com"), str(uuid.uuid4())
                )

        mock_db_session.rollback.assert_awaited_once()


# ══════════════════════════════════════════════════════════════════════════
# Likes (database)
# ══════════════════════════════════════════════════════════════════════════


class TestLikes:

    @pytest.mark.asyncio
    async def test_like_increments_counter(self, db_session, make_user):
        author = await make_user("al")
        reader = await make_user("bo")
        story = await _publish(db_session, author)

        liked = await interaction_service.like_story(db_session, reader, str(story.id))

        assert liked.likes_count == 1
        assert liked.author.username == "al"
        assert await _count(db_session, Like, story.id) == 1

    @pytest.mark.asyncio
    async def test_second_like_by_same_user_rejected(self, db_session, make_user):
        author = await make_user("al")
        story = await _publish(db_session, author)
        await interaction_service.like_story(db_session, author, str(story.id))

        with pytest.raises(ConflictError) as exc_info:
            await interaction_service.like_story(db_session, author, str(story.id))

        assert exc_info.value.message == ALREADY_LIKED
        assert (await _stored_story(db_session, story.id)).likes_count == 1
        assert await _count(db_session, Like, story.id) == 1

    @pytest.mark.asyncio
    async def test_likes_from_different_users_add_up(self, db_session, make_user):
        author = await make_user("al")
        story = await _publish(db_session, author)
        for name in ["bo", "cy", "di"]:
            reader = await make_user(name)
            await interaction_service.like_story(db_session, reader, str(story.id))

        stored = await _stored_story(db_session, story.id)
        assert stored.likes_count == 3
        assert await _count(db_session, Like, story.id) == 3

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_rejected_by_constraint(self, db_session, make_user):
        author = await make_user("al")
        story = await _publish(db_session, author)
        await interaction_service.like_story(db_session, author, str(story.id))

        # Second request passed its read-check before the first one committed
        with patch.object(interaction_service, "_find_like", AsyncMock(return_value=None)):
            with pytest.raises(ConflictError) as exc_info:
                await interaction_service.like_story(db_session, author, str(story.id))

        assert exc_info.value.message == ALREADY_LIKED
        assert (await _stored_story(db_session, story.id)).likes_count == 1
        assert await _count(db_session, Like, story.id) == 1

    @pytest.mark.asyncio
    async def test_like_unknown_story(self, db_session, make_user):
        reader = await make_user("bo")
        with pytest.raises(NotFoundError):
            await interaction_service.like_story(db_session, reader, str(uuid.uuid4()))
        assert (await db_session.execute(select(func.count()).select_from(Like))).scalar_one() == 0


# ══════════════════════════════════════════════════════════════════════════
# Comments (database)
# ══════════════════════════════════════════════════════════════════════════


class TestComments:

    @pytest.mark.asyncio
    async def test_comment_result_shape(self, db_session, make_user):
        author = await make_user("al")
        reader = await make_user("bo")
        story = await _publish(db_session, author)

        result = await interaction_service.comment_on_story(
            db_session, reader, str(story.id), CommentCreateRequest(content="Nice")
        )

        assert result.comment.content == "Nice"
        assert result.comment.user.username == "bo"
        assert result.comment.story_id == story.id
        assert result.story.comments_count == 1
        assert [c.content for c in result.story.comments] == ["Nice"]

    @pytest.mark.asyncio
    async def test_comment_preview_is_capped_but_all_are_stored(self, db_session, make_user):
        author = await make_user("al")
        story = await _publish(db_session, author)

        result = None
        for i in range(7):
            result = await interaction_service.comment_on_story(
                db_session, author, str(story.id), CommentCreateRequest(content=f"c{i}")
            )

        assert result.story.comments_count == 7
        assert [c.content for c in result.story.comments] == ["c6", "c5", "c4", "c3", "c2"]
        assert await _count(db_session, Comment, story.id) == 7

        detail = await story_service.get_story(db_session, str(story.id))
        assert detail.comments_count == 7
        assert [c.content for c in detail.comments] == [f"c{i}" for i in range(6, -1, -1)]

    @pytest.mark.asyncio
    async def test_comment_unknown_story(self, db_session, make_user):
        reader = await make_user("bo")
        with pytest.raises(NotFoundError):
            await interaction_service.comment_on_story(
                db_session, reader, str(uuid.uuid4()), CommentCreateRequest(content="hi")
            )

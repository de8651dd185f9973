"""
StoryShare Backend — Comment and Like SQLAlchemy Models
=========================================================

What:  ORM models for the `comments` and `likes` tables.
Who:   Written by InteractionService; read by StoryService for detail views.

Table Design Rationale:
    - likes has a UNIQUE (user_id, story_id) constraint. It is the final
      arbiter for concurrent like attempts: the losing insert fails and its
      whole transaction (including the counter increment) rolls back.
    - Both tables are append-only; rows are never updated or deleted.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.story import Story
    from app.models.user import User


class Comment(Base):
    """A comment left by a user on a story."""

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    story_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stories.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="comments")
    story: Mapped["Story"] = relationship(back_populates="comments")

    # Detail views read a story's comments newest-first
    __table_args__ = (
        Index("idx_comments_story_created_at", story_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, story_id={self.story_id})>"


class Like(Base):
    """A unique (user, story) approval marker."""

    __tablename__ = "likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    story_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("stories.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="likes")
    story: Mapped["Story"] = relationship(back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "story_id", name="uq_likes_user_story"),
    )

    def __repr__(self) -> str:
        return f"<Like(user_id={self.user_id}, story_id={self.story_id})>"

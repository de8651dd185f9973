"""
StoryShare Backend — Story and Category SQLAlchemy Models
===========================================================

What:  ORM models for the `stories` and `categories` tables and the
       `story_categories` association table.
Who:   Used by StoryService for create/read and by InteractionService for
       the counter updates.

Table Design Rationale:
    - likes_count / comments_count are denormalized counters. They are only
      ever changed by `UPDATE ... SET x = x + 1` in the same transaction as
      the Like/Comment insert, so they always equal count(children).
    - categories.name is UNIQUE: find-or-create is an insert that ignores
      conflicts on this key.

    Index on created_at DESC:
        Both list and detail views order newest-first.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.interaction import Comment, Like
    from app.models.user import User


story_categories = Table(
    "story_categories",
    Base.metadata,
    Column("story_id", Uuid, ForeignKey("stories.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """A named tag shared across stories. Created lazily on first use."""

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    stories: Mapped[List["Story"]] = relationship(
        secondary=story_categories,
        back_populates="categories",
    )

    def __repr__(self) -> str:
        return f"<Category(name='{self.name}')>"


class Story(Base):
    """
    A user-authored text post.

    Lifecycle:
        1. Created by an authenticated author (counters start at 0)
        2. Counters grow by exactly 1 per like/comment, never decrease
        3. Never deleted
    """

    __tablename__ = "stories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    preview: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    likes_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    comments_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
        onupdate=utcnow,
    )

    # ── Relationships ─────────────────────────────────────────────────────
    author: Mapped["User"] = relationship(back_populates="stories")
    categories: Mapped[List[Category]] = relationship(
        secondary=story_categories,
        back_populates="stories",
        order_by=Category.name,
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="story",
        order_by="desc(Comment.created_at)",
    )
    likes: Mapped[List["Like"]] = relationship(back_populates="story")

    __table_args__ = (
        Index("idx_stories_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Story(id={self.id}, title='{self.title}', "
            f"likes={self.likes_count}, comments={self.comments_count})>"
        )

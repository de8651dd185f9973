"""
StoryShare Backend — User SQLAlchemy Model
============================================

What:  ORM model representing the `users` table.
Who:   Used by AuthService for signup/login and by every authenticated
       operation that resolves the session email to a user.

Table Design Rationale:
    - email and username each carry a UNIQUE constraint; the signup
      pre-check gives the friendly error, the constraint decides races
    - password holds the bcrypt hash, never the plain text
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.interaction import Comment, Like
    from app.models.story import Story


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created at signup, never deleted.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
    )

    # bcrypt hash ($2b$...), 60 chars
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # ── Relationships ─────────────────────────────────────────────────────
    stories: Mapped[List["Story"]] = relationship(back_populates="author")
    comments: Mapped[List["Comment"]] = relationship(back_populates="user")
    likes: Mapped[List["Like"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

"""Models package - import all models so they register on Base.metadata."""
from app.models.user import User
from app.models.story import Category, Story, story_categories
from app.models.interaction import Comment, Like

__all__ = [
    "User",
    "Story",
    "Category",
    "story_categories",
    "Comment",
    "Like",
]

# Schemas package init
"""
StoryShare Backend — Pydantic Request/Response Schemas
=======================================================

What:  The API contract between the frontend and the backend.
How:   Response models serialize with camelCase aliases (likesCount,
       createdAt, publishedDate); request models accept the same keys.

    - auth.py:   signup/login bodies, session payloads
    - story.py:  story, comment and interaction payloads
    - common.py: error and health responses
"""

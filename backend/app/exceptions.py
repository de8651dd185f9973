"""
StoryShare Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": message}` JSON responses with the right status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    StoryShareError (base)
    ├── ValidationError    → 400 Bad Request (missing/malformed input)
    ├── ConflictError      → 400 Bad Request (duplicate user, duplicate like)
    ├── AuthError          → 401 Unauthorized (no session, bad credentials)
    ├── NotFoundError      → 404 Not Found (missing story or user)
    └── DatabaseError      → 500 Internal Server Error (unexpected persistence failure)
"""

from typing import Any, Dict, Optional


class StoryShareError(Exception):
    """
    Base exception for all StoryShare application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StoryShareError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, malformed email, empty comment.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(StoryShareError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Signup with a taken email/username, second like on the same story.
    HTTP:    400 Bad Request (the client contract predates a 409 mapping)
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthError(StoryShareError):
    """
    Raised when a request lacks a valid session or credentials are wrong.

    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(StoryShareError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown story id, session email that no longer maps to a user.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; services convert that
    None into NotFoundError.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(StoryShareError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint names) is logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

"""
StoryShare Backend — Auth Schemas
===================================

What:  Request and response bodies for signup, login and session lookup.

Request fields are all Optional on purpose: presence and format checks
belong to AuthService so that a missing field yields the documented
400 "Missing required fields" instead of a schema error.
"""

from typing import Optional

from pydantic import Field

from app.schemas.common import ApiModel


class SignupRequest(ApiModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None


class SignupResponse(ApiModel):
    message: str = Field(default="User created successfully")
    user_id: str = Field(description="Identifier of the created user")


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(ApiModel):
    """
    Returned by POST /api/auth/login.

    The same token is also set as an HttpOnly cookie; the body copy is for
    clients that send it as `Authorization: Bearer <token>`.
    """
    message: str = Field(default="Signed in successfully")
    user_id: str
    access_token: str
    token_type: str = Field(default="bearer")


class SessionUser(ApiModel):
    """The authenticated identity attached to a request, decoded from the token."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class SessionResponse(ApiModel):
    user: Optional[SessionUser] = None


class MessageResponse(ApiModel):
    message: str

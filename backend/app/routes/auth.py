"""
StoryShare Backend — Auth Route Handlers
==========================================

What:  Signup, login, logout and session lookup under /api/auth.
How:   Thin handlers; AuthService owns validation and persistence. Login
       sets the signed session token as an HttpOnly cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.dependencies import get_session_user
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SessionResponse,
    SessionUser,
    SignupRequest,
    SignupResponse,
)
from app.schemas.common import ErrorResponse
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    responses={
        400: {"description": "Missing fields, bad email or user exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SignupResponse:
    return await auth_service.signup(db, payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Unknown email or wrong password", "model": ErrorResponse},
    },
    summary="Sign in with email and password",
)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """
    Verify credentials and start a session.

    The token goes into an HttpOnly cookie (browser clients) and the
    response body (API clients using the Authorization header).
    """
    user, token = await auth_service.authenticate(db, payload)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return LoginResponse(user_id=str(user.id), access_token=token)


@router.post("/logout", response_model=MessageResponse, summary="Clear the session cookie")
async def logout(response: Response) -> MessageResponse:
    # Sessions are stateless; the token stays valid until it expires
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return MessageResponse(message="Signed out successfully")


@router.get("/session", response_model=SessionResponse, summary="Current session")
async def get_session(
    session_user: Optional[SessionUser] = Depends(get_session_user),
) -> SessionResponse:
    return SessionResponse(user=session_user)

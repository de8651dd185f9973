"""
StoryShare Backend — Auth Service
===================================

What:  Signup, credential verification, and session-to-user resolution.
How:   Validates input, hashes passwords with bcrypt, issues signed session
       tokens. Session state lives entirely in the token; each request
       re-resolves the acting user from the token's email.
Who:   Called by the /api/auth routes and by Story/Interaction services.

Signup Flow:
    validate fields → validate email → check email OR username taken
    → hash password → insert user → commit

Login Flow:
    look up by email → bcrypt compare → issue token
"""

import logging
import re
from typing import Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AuthError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    StoryShareError,
    ValidationError,
)
from app.models.user import User
from app.schemas.auth import LoginRequest, SignupRequest, SignupResponse
from app.security import create_session_token, hash_password, verify_password

logger = logging.getLogger(__name__)

# local-part@domain.tld, no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


class AuthService:
    """
    Business logic for accounts and sessions.

    Error Handling Strategy:
        Domain failures raise ValidationError / ConflictError / AuthError /
        NotFoundError. Unexpected SQLAlchemy errors are logged and wrapped in
        DatabaseError so the client only sees a generic 500.
    """

    async def signup(self, db: AsyncSession, payload: SignupRequest) -> SignupResponse:
        """
        Register a new user.

        Raises:
            ValidationError: a field is missing/blank or the email is malformed
            ConflictError: email or username already taken
            DatabaseError: insert failed for another reason
        """
        if not (payload.name and payload.email and payload.password and payload.username):
            raise ValidationError(message="Missing required fields")

        if not is_valid_email(payload.email):
            raise ValidationError(message="Invalid email format", field="email")

        try:
            result = await db.execute(
                select(User.id).where(
                    or_(User.email == payload.email, User.username == payload.username)
                )
            )
            if result.first() is not None:
                raise ConflictError(message="User already exists")

            user = User(
                name=payload.name,
                email=payload.email,
                username=payload.username,
                password=hash_password(payload.password),
            )
            db.add(user)
            await db.commit()

        except StoryShareError:
            raise
        except IntegrityError:
            # A concurrent signup took the email or username after our check
            await db.rollback()
            raise ConflictError(message="User already exists")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User created: %s (%s)", user.id, user.username)
        return SignupResponse(user_id=str(user.id))

    async def authenticate(self, db: AsyncSession, payload: LoginRequest) -> Tuple[User, str]:
        """
        Verify credentials and issue a session token.

        Returns:
            (user, token)
        """
        if not payload.email or not payload.password:
            raise ValidationError(message="Email and password are required")

        user = await self.get_user_by_email(db, payload.email)
        if user is None:
            raise AuthError(message="No user found with this email")

        if not verify_password(payload.password, user.password):
            logger.warning("Invalid password for user %s", user.id)
            raise AuthError(message="Invalid password")

        token = create_session_token(user_id=str(user.id), email=user.email, name=user.name)
        logger.info("Session issued for user %s", user.id)
        return user, token

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def resolve_user(self, db: AsyncSession, email: str) -> User:
        """Resolve a session email to its User, or raise NotFoundError."""
        user = await self.get_user_by_email(db, email)
        if user is None:
            raise NotFoundError(resource="user")
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()

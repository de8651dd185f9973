"""
StoryShare Backend — Password Hashing and Session Tokens
==========================================================

What:  bcrypt password hashing and signed JWT session tokens.
How:   Passwords are salted and hashed with bcrypt at the configured cost
       factor. Sessions are stateless: the token itself carries the user id,
       email and name, signed with SECRET_KEY. Nothing is stored server-side.
Who:   AuthService (signup/login) and the session dependencies.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt. Returns the hash as a string for storage."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_session_token(
    user_id: str,
    email: str,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed session token.

    Claims:
        sub:   user id (string)
        email: used by handlers to resolve the acting user
        name:  display name
        iat / exp: issue and expiry times
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode a session token. Returns None when invalid or expired."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

"""
StoryShare Backend — Request Dependencies
===========================================

What:  FastAPI dependencies that restore the session from the request.
How:   The signed token is read from the session cookie or, failing that,
       an `Authorization: Bearer <token>` header. It is verified and decoded
       on every request; the user id claim becomes `SessionUser.id`.
       Invalid or expired tokens count as "no session".
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.exceptions import AuthError
from app.schemas.auth import SessionUser
from app.security import decode_session_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is not an error, the cookie may carry the token
bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None


async def get_session_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[SessionUser]:
    """Session for the current request, or None when unauthenticated."""
    token = _extract_token(request, credentials)
    if not token:
        return None

    claims = decode_session_token(token)
    if not claims or not claims.get("sub"):
        logger.debug("Rejected invalid or expired session token")
        return None

    # Read by the access log
    request.state.session_user_id = str(claims["sub"])
    return SessionUser(
        id=str(claims["sub"]),
        email=claims.get("email"),
        name=claims.get("name"),
    )


async def require_session_user(
    session_user: Optional[SessionUser] = Depends(get_session_user),
) -> SessionUser:
    """Like get_session_user, but raises AuthError (401) when there is no session."""
    if session_user is None:
        raise AuthError()
    return session_user

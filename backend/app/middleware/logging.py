"""
StoryShare Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request.
How:   Measures duration around the downstream handler, then logs method,
       path, status, duration, request ID, the acting user (if the request
       carried a valid session) and client IP.

Example line:
    POST /api/stories/3f.../like 400 12.4ms [1f2e3d4c] user=9b1c... from 10.0.0.7

The user id comes from `request.state.session_user_id`, which the session
dependency sets once it has verified a token. Anonymous requests log `user=-`.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID, session user id
    ❌ Don't log: request bodies (passwords, story text), cookies, auth headers,
       email addresses
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("storyshare.access")

# Probes and API docs; never worth an access line
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def _status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log keyed by request ID and session user.

    Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO. So a burst
    of duplicate-like 400s shows up as warnings attributed to one user.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # request.state is shared with the endpoint's Request through the scope
        user_id = getattr(request.state, "session_user_id", None)
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            _status_level(status),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            user_id or "-",
            client_ip,
            extra={
                "request_id": rid,
                "user_id": user_id,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return response

"""
StoryShare Backend — Request ID Middleware
============================================

What:  Gives every request a correlation ID and echoes it back.
How:   Takes the client's X-Request-ID when it is a short token of safe
       characters, otherwise mints an 8-char ID. The ID is stored in a
       ContextVar (read by loggers and by the error handlers, which put it
       in every `{"error", "request_id"}` body) and returned in the
       X-Request-ID response header.
When:  Outermost of the app's own middleware, so the access log and error
       bodies always see the ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs land in log lines and JSON bodies; no spaces, newlines or quotes
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value) -> str:
    """Reuse a well-formed client ID, or mint a fresh one."""
    if header_value and _CLIENT_ID_PATTERN.fullmatch(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

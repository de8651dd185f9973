# Middleware package init
"""
StoryShare Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs, error bodies and the response header
    2. Logging: one access-log line with status and duration
    3. CORS: the frontend sends the session cookie cross-origin in development

Nothing here keeps per-client state between requests.
"""

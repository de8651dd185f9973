# Routes package init
"""
StoryShare Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:     POST /api/auth/signup, /api/auth/login, /api/auth/logout
                   GET  /api/auth/session
    - stories.py:  POST/GET /api/stories, GET /api/stories/{id},
                   POST /api/stories/{id}/like, POST /api/stories/{id}/comment
    - health.py:   GET  /health

Routes stay thin: extract request data, call a service, return its result.
Errors are raised as StoryShareError subclasses and rendered by the global
handlers in main.py.
"""

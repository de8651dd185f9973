# Services package init
"""
StoryShare Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - AuthService: signup, login, session-email → user resolution
    - StoryService: story create/list/detail, category find-or-create
    - InteractionService: likes and comments with transactional counters

Services are stateless singletons; every call receives the request's
AsyncSession, so nothing is shared between requests.
"""

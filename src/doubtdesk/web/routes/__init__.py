"""Route handlers for the Web API."""

from doubtdesk.web.routes.health import router as health_router
from doubtdesk.web.routes.auth import router as auth_router
from doubtdesk.web.routes.doubts import router as doubts_router
from doubtdesk.web.routes.answers import router as answers_router
from doubtdesk.web.routes.practice import router as practice_router
from doubtdesk.web.routes.views import router as views_router

__all__ = [
    "health_router",
    "auth_router",
    "doubts_router",
    "answers_router",
    "practice_router",
    "views_router",
]

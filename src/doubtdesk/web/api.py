"""FastAPI application factory.

Main entry point for the Doubt Desk Web API.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from doubtdesk import __version__
from doubtdesk.auth.service import EmailInUseError, InvalidCredentialsError
from doubtdesk.config.app_config import load_app_config
from doubtdesk.db.database import get_db_path, init_db
from doubtdesk.utils.validators import (
    DoubtDeskError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from doubtdesk.web.routes import (
    answers_router,
    auth_router,
    doubts_router,
    health_router,
    practice_router,
    views_router,
)

logger = structlog.get_logger(__name__)

# Error type -> HTTP status. First match wins, so subclasses go first.
ERROR_STATUS: list[tuple[type[DoubtDeskError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (EmailInUseError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def error_status(exc: DoubtDeskError) -> int:
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_doubtdesk_error(request: Request, exc: DoubtDeskError) -> JSONResponse:
    """Translate core errors into {"error": ...} responses."""
    code = error_status(exc)

    if code >= 500:
        # Storage details stay in the log
        logger.error(
            "api_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        message = "Server error. Check server logs."
    else:
        logger.info(
            "api_rejected",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        message = str(exc)

    return JSONResponse(status_code=code, content={"error": message})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    init_db(app.state.db_path or get_db_path())
    logger.info("api_startup", db_path=str(get_db_path()), version=__version__)
    yield
    # Shutdown (nothing to do for now)


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Database file; defaults to the configured path

    Returns:
        Configured FastAPI app instance
    """
    config = load_app_config()

    app = FastAPI(
        title="Doubt Desk API",
        description="Doubts, answers and practice review for students and professors",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.db_path = db_path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(DoubtDeskError, handle_doubtdesk_error)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(doubts_router)
    app.include_router(answers_router)
    app.include_router(practice_router)
    app.include_router(views_router)

    return app


# Default app instance for uvicorn
app = create_app()

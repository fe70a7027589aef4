"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.posts import router as posts_router
from backend.app.core.errors import PostErrorKind, PostsError, normalize_unknown_error
from backend.app.core.logging import EVENT_APP_START, EVENT_CONFIG_LOADED, setup_logging
from backend.app.core.settings import settings
from backend.app.db.engine import init_db
from backend.app.db.migrations import run_migrations

setup_logging(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Transport mapping for controller error kinds.
HTTP_STATUS_BY_KIND: dict[PostErrorKind, int] = {
    PostErrorKind.bad_format: 400,
    PostErrorKind.bad_input: 400,
    PostErrorKind.not_found: 404,
    PostErrorKind.internal: 500,
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info(EVENT_APP_START)
    logger.info("%s: %s", EVENT_CONFIG_LOADED, settings.safe_dump())
    init_db()
    run_migrations()
    logger.info("Posts API ready")
    yield
    logger.info("Posts API shutting down")


app = FastAPI(
    title="Posts API",
    version="0.1.0",
    description="CRUD endpoints for blog posts.",
    lifespan=lifespan,
)


@app.exception_handler(PostsError)
async def posts_error_handler(_request: Request, exc: PostsError) -> JSONResponse:
    """Translate a classified controller error into its HTTP response."""
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND[exc.kind],
        content={"detail": exc.message, "error_category": exc.kind.value},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler: log details, return safe generic message."""
    error = normalize_unknown_error(exc, operation=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND[error.kind],
        content={"detail": error.message, "error_category": "unknown"},
    )


app.include_router(health_router, tags=["health"])
app.include_router(posts_router, tags=["posts"])

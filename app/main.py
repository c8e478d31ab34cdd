import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.api.v1.routes.bookmarks import router as bookmarks_router
from app.api.v1.routes.health import router as health_router
from app.api.v1.routes.stats import router as stats_router
from app.api.v1.routes.tours import router as tours_router
from app.config import settings
from app.constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_NOT_FOUND,
    HTTP_SERVER_ERROR,
    HTTP_UNAUTHORIZED,
)
from app.exceptions import (
    AuthenticationError,
    BookmarkError,
    ErrorCategory,
    TourApiConfigurationError,
    TourApiError,
)
from app.infrastructure.external_apis.cache_client import close_cache
from app.infrastructure.external_apis.http_client import close_shared_client

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    logger.info("Starting up application...")

    if settings.USE_DB_REPOS:
        try:
            from app.infrastructure.persistence.db import init_db
            init_db()
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            # Continue anyway - tour listing and stats do not need the DB

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_shared_client()
    await close_cache()


def tour_api_error_status(error: TourApiError) -> int:
    """HTTP status for an upstream failure surfaced to our clients."""
    if isinstance(error, TourApiConfigurationError):
        return HTTP_SERVER_ERROR
    if error.category == ErrorCategory.API and error.status_code == HTTP_NOT_FOUND:
        return HTTP_NOT_FOUND
    return HTTP_BAD_GATEWAY


def create_app() -> FastAPI:
    """Create FastAPI application and include routers."""
    app = FastAPI(
        title="MyTrip Backend",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TourApiError)
    async def handle_tour_api_error(request: Request, exc: TourApiError):
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        return JSONResponse(
            status_code=tour_api_error_status(exc),
            content={
                "detail": exc.user_message,
                "category": exc.category.value,
                "status_code": exc.status_code,
                "retryable": exc.is_retryable,
            },
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=HTTP_UNAUTHORIZED, content={"detail": str(exc)})

    @app.exception_handler(BookmarkError)
    async def handle_bookmark_error(request: Request, exc: BookmarkError):
        return JSONResponse(status_code=HTTP_BAD_REQUEST, content={"detail": str(exc)})

    app.include_router(tours_router, prefix="/api/v1")
    app.include_router(stats_router, prefix="/api/v1")
    app.include_router(bookmarks_router, prefix="/api/v1")
    app.include_router(health_router, prefix="/api/v1")
    return app


app = create_app()


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}

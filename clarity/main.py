"""
Main FastAPI application.

This is the entry point for the API server:
    uvicorn clarity.main:app --port 3001
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from clarity.core.config import settings
from clarity.core.logging_setup import configure_logging
from clarity.db.session import engine
from clarity.errors import register_error_handlers
from clarity.routers import health, preferences, tasks, user

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup settings and release the connection pool on shutdown."""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s", settings.APP_NAME)
    logger.info("Allowed CORS origins: %s", settings.allowed_origins)

    yield

    logger.info("Shutting down %s", settings.APP_NAME)
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Backend API for the Clarity personal task tracker",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )

    @app.middleware("http")
    async def log_and_disable_api_cache(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            response.headers.update(NO_CACHE_HEADERS)
        logger.info(
            "%s %s - Origin: %s - %s",
            request.method,
            request.url.path,
            request.headers.get("origin", "none"),
            response.status_code,
        )
        return response

    register_error_handlers(app)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(tasks.router)
    app.include_router(user.router)
    app.include_router(preferences.router)

    return app


app = create_app()

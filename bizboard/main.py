"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import Settings, settings as default_settings
from .core.database import Database
from .core.exceptions import AppError, StorageError, ValidationError
from .core.logging_config import configure_logging
from .schemas import format_validation_errors
from .storage import create_storage
from .api import (
    auth_router,
    users_router,
    dashboard_router,
    recommendations_router,
    integrations_router,
    team_router,
    company_router,
    activities_router,
    notifications_router,
    system_router,
)

logger = logging.getLogger(__name__)


def _error_body(exc: AppError) -> dict:
    body = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Map the application error taxonomy onto HTTP responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, StorageError) and exc.status_code >= 500:
            logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.detail}", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(format_validation_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=_error_body(error))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Tests pass their own ``Settings``."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        configure_logging(settings.LOG_LEVEL, debug=settings.DATABASE_ECHO)
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        if settings.AUTO_CREATE_TABLES:
            database.create_all()
        app.state.settings = settings
        app.state.storage = create_storage(settings, database)
        logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")

        yield

        # Shutdown
        app.state.storage.close()
        logger.info(f"{settings.APP_NAME} stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="API for Bizboard - a multi-tenant business intelligence dashboard.",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(dashboard_router)
    app.include_router(recommendations_router)
    app.include_router(integrations_router)
    app.include_router(team_router)
    app.include_router(company_router)
    app.include_router(activities_router)
    app.include_router(notifications_router)
    app.include_router(system_router)

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/system/health",
        }

    return app


app = create_app()

"""
FastAPI Application Entry Point.

Builds the XNote API. The lifespan owns the two long-lived objects, the
Database and the TrashScheduler, and publishes them on app.state for the
request dependencies and health checks.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xnote.backend.api import health
from xnote.backend.api.routes import router as api_router
from xnote.backend.core.config import get_app_config, get_trash_retention_days
from xnote.backend.core.database import create_database
from xnote.backend.core.exception_handlers import register_exception_handlers
from xnote.backend.core.exceptions import DatabaseError
from xnote.backend.core.logging import get_logger, setup_logging
from xnote.backend.core.middleware import RequestContextMiddleware
from xnote.backend.tasks.trash_scheduler import TrashScheduler

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )

    database = create_database()
    try:
        await database.connect()
        await database.create_tables()
    except DatabaseError:
        # Keep serving; requests fail with 503 until the store answers
        logger.error("Starting without a reachable database")
    app.state.database = database

    features = app_config.features
    trash = app_config.trash
    scheduler = TrashScheduler(
        database,
        retention_days=get_trash_retention_days(),
        purge_hour=trash.purge_hour,
        purge_minute=trash.purge_minute,
    )
    if features.trash_startup_report_enabled:
        await scheduler.report_eligible()
    if features.trash_scheduler_enabled:
        scheduler.start()
    app.state.trash_scheduler = scheduler

    yield

    await scheduler.stop()
    await database.disconnect()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=app_config.features.api_request_logging,
    )

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": f"Welcome to the {app_settings.name}"}

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix="/api")

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn xnote.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from app.config import Settings, get_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.infrastructure.database import Database

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import User  # noqa: F401

from app.interfaces.api.health import liveness_router
from app.interfaces.api.health import router as health_router
from app.interfaces.api.users import router as users_router

logger = structlog.get_logger(__name__)


def build_database(settings: Settings) -> Database:
    return Database(
        settings.database_url,
        pool_max=settings.DB_POOL_MAX,
        acquire_timeout=settings.DB_POOL_ACQUIRE_TIMEOUT_S,
        idle_seconds=settings.DB_POOL_IDLE_S,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Reconcile the schema once before serving; dispose the pool on shutdown."""
    database: Database = app.state.database
    logger.info("Starting users API", env=app.state.settings.ENVIRONMENT)

    if not database.reconciled and not database.reconcile():
        # Requests will fail individually at store-access time.
        logger.error("Continuing without a verified database connection")

    yield

    database.dispose()
    logger.info("Users API stopped")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Users API",
        description="Create and list users",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or build_database(settings)

    setup_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(health_router, prefix=settings.API_PREFIX)
    app.include_router(users_router, prefix=settings.API_PREFIX)
    app.include_router(liveness_router)

    return app


app = create_app()

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from api.handlers.exceptions import register_exception_handlers
from api.middleware.request_id import register_request_id_middleware
from api.post_controller import posts_router
from api.routes.system import router as system_router
from core.config import settings
from core.exceptions import InitError
from core.logging import setup_logging
from db.database import check_db_connection, close_db_connections, create_db_engine, create_session_maker, init_db

# Initialize global logging configuration early
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting up %s", settings.api_title)

    db_cfg = settings.database
    if db_cfg is None:
        raise InitError("Database configuration not initialized")

    try:
        engine = create_db_engine(db_cfg)
    except (SQLAlchemyError, ValueError, ImportError) as e:
        logger.error("Failed to build the database engine: %s", e)
        raise InitError(f"error during initialization: {e!r}") from e

    try:
        if settings.server.check_db_on_start:
            if not await check_db_connection(engine):
                raise InitError("Database connection failed")
        else:
            logger.debug("Skipping DB connection check on startup (DB_CHECK_ON_START=false)")

        if db_cfg.create_tables:
            await init_db(engine)
    except (InitError, SQLAlchemyError, OSError) as e:
        logger.error("Application startup failed: %s", e)
        await engine.dispose()
        if isinstance(e, InitError):
            raise
        raise InitError(f"error during initialization: {e!r}") from e

    # Shared read-only by every request for the life of the process
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    logger.info("Application startup completed")

    try:
        yield
    finally:
        logger.info("Shutting down %s", settings.api_title)
        await close_db_connections(engine)
        logger.info("Application shutdown completed")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        openapi_url="/openapi.json" if settings.environment != "production" else None,
    )

    # Routers
    app.include_router(posts_router)
    app.include_router(system_router)

    # Middlewares
    register_request_id_middleware(app)

    # Exception handlers
    register_exception_handlers(app)

    return app

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from core.config_models import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()

_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
    "postgresql+psycopg2": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
}


def to_async_dsn(url: str) -> str:
    """Rewrite a sync or driverless URL to the matching asyncio driver."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        return url
    return f"{_ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_options(cfg: DatabaseConfig, url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": cfg.echo}
    # In-memory SQLite runs on a single static connection and takes no pool sizing
    if _is_memory_sqlite(url):
        return options
    options.update(
        pool_size=cfg.pool_size,
        max_overflow=cfg.max_overflow,
        pool_timeout=cfg.pool_timeout,
        pool_pre_ping=cfg.pool_pre_ping,
        pool_recycle=3600,
    )
    return options


def create_db_engine(cfg: DatabaseConfig) -> AsyncEngine:
    url = to_async_dsn(cfg.url)
    engine = create_async_engine(url, **_engine_options(cfg, url))
    logger.debug("AsyncEngine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    from db.models import post as _post_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def check_db_connection(engine: AsyncEngine) -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection is healthy")
        return True
    except Exception as e:
        logger.error("Database connection check failed: %s", e)
        return False


async def close_db_connections(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Database connections closed")


def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


def get_session_maker(request: Request) -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the process-wide session factory."""
    return request.app.state.session_maker

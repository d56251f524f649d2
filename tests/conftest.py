# ruff: noqa: E402
# IMPORTANT:
# 1) Set environment variables (DATABASE_URL etc.) first, then import app modules.
# 2) anyio_backend must be session-scoped to avoid ScopeMismatch.

from collections.abc import AsyncGenerator
import os
import tempfile

from asgi_lifespan import LifespanManager
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


# --- Function for early test environment setup ---
# Must be called before any application imports
def _setup_test_environment() -> str:
    """Sets up environment variables for tests and returns the final DATABASE_URL."""
    load_dotenv(".env.test", override=False)

    os.environ.setdefault("DB_CHECK_ON_START", "true")
    os.environ.setdefault("DB_CREATE_TABLES", "true")

    # Priority: TEST_DATABASE_URL -> throwaway SQLite file
    test_dsn = os.getenv("TEST_DATABASE_URL")
    if not test_dsn:
        db_dir = tempfile.mkdtemp(prefix="postservice-tests-")
        test_dsn = f"sqlite+aiosqlite:///{os.path.join(db_dir, 'test.sqlite3')}"

    # --- CRITICAL: Set DATABASE_URL before importing application modules ---
    os.environ["DATABASE_URL"] = test_dsn
    return test_dsn


# --- EARLY ENVIRONMENT INITIALIZATION ---
TEST_DATABASE_URL = _setup_test_environment()


# isort: off
from app import create_app
from core.config import settings
from db.database import create_db_engine, create_session_maker, get_session_maker, init_db

# isort: on


async def _clear_posts(engine) -> None:
    async with engine.begin() as conn:
        await conn.execute(text("DELETE FROM posts"))


# --- Pytest Fixtures ---


@pytest.fixture(scope="session")
def app():
    """FastAPI application instance for tests, created by factory."""
    return create_app()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Align anyio_backend scope with anyio plugin expectations."""
    return "asyncio"


@pytest.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client with app lifespan management for integration tests.
    The lifespan builds a fresh engine on the current event loop; the posts
    table is emptied before and after each test.
    """
    async with LifespanManager(app):
        await _clear_posts(app.state.engine)
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app),
                base_url="http://testserver.local",
            ) as ac:
                yield ac
        finally:
            await _clear_posts(app.state.engine)


@pytest.fixture(scope="function")
async def unit_client(app) -> AsyncGenerator[AsyncClient]:
    """
    Lightweight HTTP client for unit tests without lifespan management.
    The session factory dependency is stubbed; tests monkeypatch the service layer.
    """
    app.dependency_overrides[get_session_maker] = lambda: None
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver.local",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_session_maker, None)


@pytest.fixture(scope="function")
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Session factory bound to a per-test engine, for repository and executor tests."""
    engine = create_db_engine(settings.database)
    await init_db(engine)
    await _clear_posts(engine)
    try:
        yield create_session_maker(engine)
    finally:
        await _clear_posts(engine)
        await engine.dispose()

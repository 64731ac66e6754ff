"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file, created from the model
metadata, so tests never share rows.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

import src.teamgate.models  # noqa: F401 - registers tables on the metadata
from src.teamgate.api.dependencies.db import get_db_session
from src.teamgate.core import redis as redis_core
from src.teamgate.core.db import get_session
from src.teamgate.main import create_app
from tests.helpers import Services, build_services


@pytest.fixture(autouse=True)
async def _reset_redis_between_tests() -> AsyncGenerator[None]:
    """Redis clients hold a reference to their event loop; start every test clean."""
    redis_core.reset_redis_state()
    yield
    await redis_core.close_redis()


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'teamgate.db'}", poolclass=NullPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for direct setup and assertions.

    The session never auto-commits; tests that write rows directly must
    call `await session.commit()` before a service reads them.
    """
    async with AsyncSession(engine, expire_on_commit=False, autoflush=False) as session:
        yield session


@pytest.fixture
async def catalog(engine: AsyncEngine) -> None:
    """Seed permissions and system role templates."""
    async with get_session(engine) as session:
        await build_services(session).roles.seed_catalog()


@pytest.fixture
async def services(db_session: AsyncSession, catalog: None) -> Services:
    return build_services(db_session)


@pytest.fixture
async def other_services(engine: AsyncEngine, catalog: None) -> AsyncGenerator[Services]:
    """A second, independent request context on the same database."""
    async with get_session(engine) as session:
        yield build_services(session)


@pytest.fixture
async def client(engine: AsyncEngine, catalog: None) -> AsyncGenerator[AsyncClient]:
    """HTTP client; every request gets a fresh session on the test database."""
    app = create_app()

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

"""Service test fixtures — async DB, FastAPI test client and a SQL migration runner.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so /health/ready and get_migration_runner see the test engine
    - runner works on a file database and a temp migrations dir per test

Design Decisions:
    - SQLite in-memory for route tests: fast, no external dependency
      (PostgreSQL-only SQL is not exercised here)
    - Runner gets its own file database: migrations open several connections and
      must see each other's DDL
    - Clock and batch suffix pinned so batch ids are predictable
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401
from app.api.dependencies import get_migration_runner
from app.db.base import Base
from app.db.session import create_session_factory
from app.infrastructure.database import get_db, DatabaseSessionManager
import app.infrastructure.database as db_module
from app.main import app
from app.services.migration_runner import MigrationRunner

from tests.services.sample_migrations import FIXED_NOW, SAMPLE_MIGRATIONS, write_migrations


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def migrations_dir(tmp_path):
    directory = tmp_path / "sql_migrations"
    write_migrations(directory, SAMPLE_MIGRATIONS)
    return directory


@pytest.fixture
async def runner_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'runner.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def runner(runner_engine, migrations_dir):
    return MigrationRunner(
        runner_engine, migrations_dir,
        clock=lambda: FIXED_NOW, batch_suffix=lambda: 35,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, runner):
    """FastAPI test client with DB and migration runner dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_migration_runner] = lambda: runner

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager

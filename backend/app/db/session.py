"""Async Engine Factory — engines and sessions outside FastAPI (CLI, test fixtures).

Invariants:
    - Same pool rules as DatabaseSessionManager (shared build_engine)
    - Callers own the engine and must dispose it

Design Decisions:
    - Separate from infrastructure/database.py: the CLI must not depend on the app singleton
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.config import Settings
from app.infrastructure.database import build_engine


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    return build_engine(
        settings.database_url,
        settings.database_pool_size,
        settings.database_max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

"""
Database Configuration

Async SQLAlchemy engine, session factory and declarative base.
The relational store is the single source of truth and the only
synchronization point between concurrent requests.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from placement.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def _engine_options(database_url: str) -> dict:
    options: dict = {"echo": settings.database_echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides one session per request.

    Usage:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_maker() as session:
        yield session


def import_models() -> None:
    """Import every ORM module so Base.metadata knows all tables."""
    from placement.modules.accounts import models as _accounts  # noqa: F401
    from placement.modules.applications import models as _applications  # noqa: F401
    from placement.modules.postings import models as _postings  # noqa: F401


async def init_db() -> None:
    """
    Verify the database connection on startup.

    In development the schema is created directly from the models;
    other environments are expected to run the Alembic migrations.
    """
    import_models()
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if settings.is_development:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Development mode: ensured database schema")


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    await engine.dispose()

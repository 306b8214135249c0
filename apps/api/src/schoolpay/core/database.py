"""
Database Configuration

Async SQLAlchemy engine and session factory for the SQL storage backend.
Only used when STORAGE_BACKEND=sql; the default backend keeps everything
in memory.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM rows."""


# Engine and session factory instances
engine: AsyncEngine | None = None
async_session_maker: async_sessionmaker | None = None


def create_session_maker(database_url: str) -> tuple[AsyncEngine, async_sessionmaker]:
    """
    Build an engine and a session factory for a database URL.

    Args:
        database_url: SQLAlchemy async URL, e.g. sqlite+aiosqlite:///./schoolpay.db

    Returns:
        (engine, session factory) with expire_on_commit disabled
    """
    new_engine = create_async_engine(database_url, echo=False)
    session_maker = async_sessionmaker(new_engine, expire_on_commit=False)
    return new_engine, session_maker


async def create_tables(target: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    # Importing the models registers their tables on Base.metadata
    from schoolpay.modules.schools import models as _school_models  # noqa: F401
    from schoolpay.modules.students import models as _student_models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db(database_url: str) -> async_sessionmaker:
    """
    Initialize the database connection and schema.

    Call this on application startup when the SQL backend is selected.
    """
    global engine, async_session_maker
    engine, async_session_maker = create_session_maker(database_url)
    await create_tables(engine)
    logger.info("Database schema ready")
    return async_session_maker


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    global engine, async_session_maker
    if engine is not None:
        await engine.dispose()
        engine = None
        async_session_maker = None

"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: SQLite by default, PostgreSQL via DATABASE_URL
- Async session management: one session per request
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from snaplink.core.setting import settings
from snaplink.db import models  # noqa: F401  registers tables on SQLModel.metadata
from snaplink.db.sqlite_adapter import get_database_adapter

db_adapter = get_database_adapter(settings.DATABASE_URL)

engine = db_adapter.create_engine(settings.DATABASE_URL)


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Create an async session factory bound to ``bind``.

    expire_on_commit=False keeps loaded objects usable after commit, which
    endpoints rely on when serializing a link they just saved.
    """
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session
    - Yields it to the endpoint
    - Commits on success, rolls back on exception
    - Closes session automatically (context manager handles it)
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_models(bind: Optional[AsyncEngine] = None) -> None:
    """Create any missing tables. Schema changes still go through Alembic."""
    bind = bind or engine
    async with bind.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)


async def drop_models(bind: AsyncEngine) -> None:
    async with bind.begin() as connection:
        await connection.run_sync(SQLModel.metadata.drop_all)

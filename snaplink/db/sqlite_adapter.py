"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking); concurrent writers queue on the
  busy timeout instead of failing with "database is locked"
- Foreign keys are off unless enabled per connection
"""

from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import NullPool

from snaplink.core.setting import settings
from snaplink.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Each session gets its own connection (NullPool), so concurrent requests
    never share a transaction; SQLite itself serializes their writes.
    """

    def __init__(self, busy_timeout: Optional[float] = None):
        self.busy_timeout = settings.SQLITE_BUSY_TIMEOUT if busy_timeout is None else busy_timeout

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        """
        Get SQLite-specific connection arguments.

        - check_same_thread=False: aiosqlite runs the connection in a worker thread
        - timeout: seconds to wait for a write lock held by another connection
        """
        return {
            "check_same_thread": False,
            "timeout": self.busy_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def register_connection_hooks(self, engine: AsyncEngine) -> None:
        """Enable foreign key enforcement on every new connection."""

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    def get_dialect_name(self) -> str:
        return "sqlite"


def get_database_adapter(database_url: Optional[str] = None) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns SQLiteAdapter for sqlite URLs (the default) and
    PostgreSQLAdapter for postgresql URLs.

    Raises:
        ValueError: If the URL names an unsupported dialect
    """
    database_url = database_url or settings.DATABASE_URL
    dialect = database_url.split(":", 1)[0].split("+", 1)[0]

    if dialect == "sqlite":
        return SQLiteAdapter()
    if dialect in ("postgresql", "postgres"):
        from snaplink.db.postgres_adapter import PostgreSQLAdapter
        return PostgreSQLAdapter()

    raise ValueError(f"Unsupported database dialect: {dialect}")

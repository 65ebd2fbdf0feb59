"""
PostgreSQL Database Adapter

Server-based backend for production deployments. Uses the asyncpg driver
(postgresql+asyncpg://...) and SQLAlchemy's default queue pool, since
connections are expensive to open and safe to reuse.
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool

from snaplink.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def __init__(self, pool_size: int = 10, max_overflow: int = 20):
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
        }

    def register_connection_hooks(self, engine: AsyncEngine) -> None:
        # Foreign keys and row locking need no per-connection setup here.
        return None

    def get_dialect_name(self) -> str:
        return "postgresql"

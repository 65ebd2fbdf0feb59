"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- PostgreSQLAdapter: asyncpg-backed implementation for production
- Session management: Database session creation and management

Note: session is imported lazily by callers (snaplink.db.session) so that
importing models alone never opens an engine.
"""

from snaplink.db.interface import DatabaseAdapter
from snaplink.db.models import Link, User

__all__ = [
    "DatabaseAdapter",
    "Link",
    "User",
]

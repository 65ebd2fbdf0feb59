import pytest
from sqlalchemy import text
from sqlalchemy.pool import NullPool

from snaplink.db.postgres_adapter import PostgreSQLAdapter
from snaplink.db.sqlite_adapter import SQLiteAdapter, get_database_adapter


@pytest.mark.parametrize(
    "database_url, adapter_class, dialect",
    [
        ("sqlite+aiosqlite:///./snaplink.db", SQLiteAdapter, "sqlite"),
        ("postgresql+asyncpg://user:pw@localhost/snaplink", PostgreSQLAdapter, "postgresql"),
    ],
)
def test_adapter_is_picked_by_dialect(database_url, adapter_class, dialect):
    adapter = get_database_adapter(database_url)

    assert isinstance(adapter, adapter_class)
    assert adapter.get_dialect_name() == dialect


def test_unsupported_dialect():
    with pytest.raises(ValueError):
        get_database_adapter("mysql+aiomysql://localhost/snaplink")


def test_sqlite_adapter_uses_null_pool():
    assert SQLiteAdapter().get_pool_class() is NullPool


@pytest.mark.asyncio
async def test_sqlite_connections_enforce_foreign_keys(db_engine):
    async with db_engine.connect() as connection:
        result = await connection.execute(text("PRAGMA foreign_keys"))
        assert result.scalar() == 1

"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path; the FastAPI app's
session dependency is pointed at it, so API tests and service tests see
the same data.
"""

import os

# Must be set before snaplink is imported: settings are read at import time.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["BASE_URL"] = "http://sl.test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./snaplink-test-unused.db"

import httpx
import pytest
import pytest_asyncio

from snaplink.core.security import hash_password
from snaplink.db.models import User
from snaplink.db.session import build_session_maker, drop_models, get_session, init_models
from snaplink.db.sqlite_adapter import SQLiteAdapter
from snaplink.main import app


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = SQLiteAdapter().create_engine(f"sqlite+aiosqlite:///{tmp_path / 'snaplink.db'}")
    await init_models(engine)
    yield engine
    await drop_models(engine)
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return build_session_maker(db_engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_user(session_maker):
    """Insert a user directly and return its id."""

    async def _make_user(email: str, name: str = "Test User", password: str = "secret123") -> int:
        async with session_maker() as session:
            user = User(name=name, email=email, password_hash=hash_password(password))
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user.id

    return _make_user


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register + log in through the API; returns a factory of bearer headers."""

    async def _auth_headers(email: str, name: str = "Test User", password: str = "secret123") -> dict:
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        response = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        # Keep later requests anonymous unless they pass the header explicitly
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _auth_headers

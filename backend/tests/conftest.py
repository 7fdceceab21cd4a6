"""
Shared fixtures: a fresh in-memory SQLite database per test, wired into the
FastAPI app through dependency overrides.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from task_api.main import app
from task_api.core.database import Base, enable_sqlite_foreign_keys, get_db
from task_api.core.permissions import ADMIN_ROLE
from task_api.core.seed import seed_roles
from task_api.services.credential_store import CredentialStore

PASSWORD = "Passw0rd!"

@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_roles(session)
    yield factory
    await engine.dispose()

@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session

@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        yield ac
    app.dependency_overrides.clear()

async def register(client, email, username, password=PASSWORD):
    response = await client.post("/api/auth/register", json={
        "email": email,
        "username": username,
        "password": password,
        "confirmPassword": password,
    })
    assert response.status_code == 200, response.text
    return response.json()

def bearer(token):
    return {"Authorization": f"Bearer {token}"}

@pytest_asyncio.fixture
async def alice(client):
    return await register(client, "alice@example.com", "alice")

@pytest_asyncio.fixture
async def bob(client):
    return await register(client, "bob@example.com", "bob")

@pytest_asyncio.fixture
async def admin(client, session_factory):
    async with session_factory() as session:
        store = CredentialStore(session)
        result = await store.create_user("admin@example.com", "admin", PASSWORD)
        assert result.succeeded, result.errors
        await store.add_to_role(result.user, ADMIN_ROLE)

    response = await client.post("/api/auth/login", json={
        "email": "admin@example.com",
        "password": PASSWORD,
    })
    assert response.status_code == 200, response.text
    return response.json()

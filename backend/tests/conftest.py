import os
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import create_app
from shared.config import Settings
from shared.dependencies import get_db
from shared.infrastructure.database import Base
from shared.security import hash_password
from users.domain.entities import UserRole
from users.infrastructure.orm_models import UserModel

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")
CLIENT_ID = "test-client"
CLIENT_HEADERS = {"clientid": CLIENT_ID}


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": TEST_DATABASE_URL,
        "CLIENT_ID": CLIENT_ID,
        "SITE_MODE": "",
        "ENVIRONMENT": "production",
        "JWT_SECRET": "test-secret",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
async def test_engine():
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db(test_engine):
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, test_engine):
    application = create_app(settings)
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = _override
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=CLIENT_HEADERS
    ) as ac:
        yield ac


async def insert_user(
    db: AsyncSession,
    email: str,
    password: str | None = None,
    role: UserRole = UserRole.USER,
    created_at: datetime | None = None,
    **fields,
) -> UserModel:
    """Write a user row directly, bypassing the API."""
    model = UserModel(
        email=email,
        password_hash=hash_password(password) if password else None,
        role=role.value,
        **fields,
    )
    if created_at is not None:
        model.created_at = created_at
    db.add(model)
    await db.commit()
    await db.refresh(model)
    return model


async def login_headers(client: AsyncClient, email: str, password: str) -> dict:
    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    token = resp.json()["data"]["accessToken"]
    return {"Authorization": f"Bearer {token}"}


async def create_user_and_get_headers(client: AsyncClient, suffix: str = "") -> dict:
    """Register a user and return auth headers."""
    await client.post(
        "/api/auth/register",
        json={
            "email": f"test{suffix}@example.com",
            "firstName": "Test",
            "lastName": "User",
            "password": "secret123",
        },
    )
    return await login_headers(client, f"test{suffix}@example.com", "secret123")


@pytest.fixture
async def auth_headers(client) -> dict:
    return await create_user_and_get_headers(client)


@pytest.fixture
async def admin_headers(client, db) -> dict:
    await insert_user(db, "admin@example.com", password="adminpass1", role=UserRole.ADMIN)
    return await login_headers(client, "admin@example.com", "adminpass1")

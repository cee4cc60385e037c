"""Global test configuration and fixtures for the membership sync API."""

from collections.abc import AsyncGenerator
from typing import Callable
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt

from src.api.core.constants import JWT_ALGORITHM, JWT_AUDIENCE
from src.database.models import Base, Member
from src.modules.member.service import MembershipStateStore
from tests.factories import MemberFactory
from tests.utils.webhooks import PADDLE_WEBHOOK_SECRET, POLAR_WEBHOOK_SECRET

JWT_SECRET = "test-supabase-jwt-secret-with-enough-length"


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Pin every setting the app reads so a local .env cannot leak in."""
    monkeypatch.setenv("ENVIRONMENT", "TEST")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("POLAR_WEBHOOK_SECRET", POLAR_WEBHOOK_SECRET)
    monkeypatch.setenv("PADDLE_WEBHOOK_SECRET", PADDLE_WEBHOOK_SECRET)
    monkeypatch.setenv("POLAR_ACCESS_TOKEN", "polar_oat_test_token")
    monkeypatch.setenv("PADDLE_API_KEY", "pdl_test_key")
    monkeypatch.setenv("PADDLE_ENVIRONMENT", "sandbox")
    monkeypatch.setenv("ADMIN_USER_IDS", "[]")
    monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "0")


@pytest.fixture
def member_factory():
    return MemberFactory


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """File backed SQLite database with the schema created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'members.db'}", echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=async_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fetch_member(session_factory) -> Callable:
    """Read a member through a fresh session, as a later request would."""

    async def _fetch(user_id: str) -> Member | None:
        async with session_factory() as session:
            return await MembershipStateStore(session).get(user_id)

    return _fetch


@pytest_asyncio.fixture
async def app(session_factory) -> AsyncGenerator[FastAPI, None]:
    """FastAPI application bound to the test database."""
    from src.main import app

    async with LifespanManager(app):
        app.state.session_factory = session_factory
        yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test-public"
    ) as client:
        yield client


@pytest.fixture
def jwt_token_factory() -> Callable[..., str]:
    """Issue Supabase style access tokens signed with the test secret."""

    def _create(
        user_id: str | None = None,
        email: str = "member@example.com",
        role: str = "authenticated",
        secret: str = JWT_SECRET,
    ) -> str:
        payload = {
            "sub": user_id or str(uuid4()),
            "email": email,
            "role": role,
            "aud": JWT_AUDIENCE,
        }
        return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)

    return _create


@pytest.fixture
def user_id() -> str:
    return str(uuid4())


@pytest_asyncio.fixture
async def authorized_client(
    app: FastAPI, jwt_token_factory, user_id: str
) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as ``user_id``."""
    token = jwt_token_factory(user_id=user_id)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test-authorized",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client

"""Shared test fixtures."""

import json
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from pathcraft.agent.llm import get_model_client
from pathcraft.api.deps import get_db
from pathcraft.core.auth import DEFAULT_USER_ID, ensure_default_user
from pathcraft.core.database import create_session_factory, init_db
from pathcraft.main import app
from tests.factories import FakeModelClient, make_roadmap_payload


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    factory = create_session_factory(test_engine)
    async with factory() as session:
        await ensure_default_user(session)
        await session.commit()
        yield session


@pytest.fixture
def user_id() -> int:
    return DEFAULT_USER_ID


@pytest.fixture
def fake_model() -> FakeModelClient:
    return FakeModelClient(response=json.dumps(make_roadmap_payload([1, 2])))


@pytest_asyncio.fixture
async def client(
    test_engine: AsyncEngine, test_session: AsyncSession, fake_model: FakeModelClient
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, the test database and the fake model."""
    factory = create_session_factory(test_engine)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_model_client] = lambda: fake_model
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()

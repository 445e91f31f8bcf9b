"""Service test fixtures — async DB, fake dataset and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - get_player_dataset overridden with the in-memory fake (no player tables needed)
    - db_manager patched so code reaching for it directly (readiness probe) hits SQLite

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the partial unique index and
      ON CONFLICT upsert both exist in SQLite, so template and cache rules are exercised
    - StaticPool: every session shares the one in-memory connection
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import dailygrid.infrastructure.database as db_module
import dailygrid.models  # noqa: F401
from dailygrid.api.dependencies import get_player_dataset
from dailygrid.db.base import Base
from dailygrid.infrastructure.database import DatabaseSessionManager, get_db
from dailygrid.main import app
from tests.fake_dataset import GRAND_SLAMS, FakePlayerDataset, roster


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def dataset():
    return FakePlayerDataset(
        roster(),
        catalog=GRAND_SLAMS,
        achievement_types=["career_grand_slam"],
    )


@pytest.fixture
async def client(test_engine, test_session_factory, dataset):
    """FastAPI test client with DB and dataset dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_player_dataset] = lambda: dataset

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager

"""
Pytest fixtures for test infrastructure.

This module is automatically loaded by pytest and provides shared fixtures.
Environment defaults are set before csintel is imported so the settings
singleton and module-level engine pick them up.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("API_KEYS", "test-key")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("SYNC_FREQUENCY", "disabled")
os.environ.setdefault("INGESTION_DELAY_SCALE", "0")
os.environ.setdefault("PBKDF2_ITERATIONS", "1000")
os.environ.setdefault("DATA_PROTECTION_MASTER_KEY", "ab" * 32)
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["SLACK_WEBHOOK_URL"] = ""
os.environ["DISCORD_WEBHOOK_URL"] = ""

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from csintel.analyst.company_analyst import clear_market_cache
from csintel.archivist import models  # noqa: F401  (registers tables on SQLModel.metadata)
from csintel.archivist.database import get_db
from csintel.archivist.seed import seed_database
from csintel.common.cache import cache

TEST_API_KEY = "test-key"


# =============================================================================
# Global fixtures (autouse)
# =============================================================================
@pytest.fixture(autouse=True)
def reset_caches():
    """Response and market caches are process-wide; start every test empty."""
    cache.clear()
    clear_market_cache()
    yield
    cache.clear()
    clear_market_cache()


# =============================================================================
# Database fixtures
# =============================================================================
@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite engine; a fresh schema per test."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'csintel_test.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
async def seeded(session_factory):
    """Load the demo dataset and return the seed counts."""
    async with session_factory() as db_session:
        return await seed_database(db_session)


# =============================================================================
# API fixtures
# =============================================================================
@pytest.fixture
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database.

    The lifespan is not run, so no seeding or scheduler start happens.
    """
    from csintel.main import app

    async def override_get_db():
        async with session_factory() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-API-Key": TEST_API_KEY}

"""Integration test fixtures for database operations.

These fixtures require a reachable PostgreSQL database (DATABASE_URL).
Tests are skipped when it cannot be reached.
"""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.flowbridge.core import db
from src.flowbridge.core.config import get_settings
from src.flowbridge.core.db import run_migrations_sync
from src.flowbridge.models import N8nIntegration
from tests.factories import IntegrationFactory

TABLES = (
    "n8n_template_installations",
    "n8n_workflow_executions",
    "n8n_event_mappings",
    "n8n_workflows",
    "n8n_templates",
    "n8n_integrations",
)


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    await asyncio.to_thread(run_migrations_sync)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {', '.join(f'public.{t}' for t in TABLES)} CASCADE"))
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit; tests commit explicitly.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def stored_integration(db_session: AsyncSession) -> N8nIntegration:
    integration = IntegrationFactory.build()
    db_session.add(integration)
    await db_session.commit()
    return integration

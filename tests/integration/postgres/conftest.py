"""Fixtures for running against a real PostgreSQL server."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from testcontainers.postgres import PostgresContainer

from evented import EventApplier
from evented.integrations.sqlalchemy import DatabaseConfiguration


@pytest.fixture(scope="module")
def postgres_container():
    """Start PostgreSQL container for tests."""
    container = PostgresContainer("postgres:16-alpine", driver="asyncpg")
    with container:
        yield container


@pytest_asyncio.fixture
async def database(postgres_container) -> AsyncIterator[DatabaseConfiguration]:
    """Create a fresh schema on the container database."""
    config = DatabaseConfiguration(
        url=postgres_container.get_connection_url(),
        engine_options={"pool_size": 10, "max_overflow": 10},
    )
    await config.drop_all()
    await config.create_all()
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest.fixture
def applier(database, registry) -> EventApplier:
    return EventApplier(database.session_factory, registry)

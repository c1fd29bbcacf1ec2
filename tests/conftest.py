"""Central test fixtures - imports from unified test_app."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from evented import EventApplier, EventStore, EventTypeRegistry
from evented.integrations.sqlalchemy import DatabaseConfiguration

# Import all test domain objects from unified test app
from tests.fixtures.test_app import Exploded, Incremented, Started


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncIterator[DatabaseConfiguration]:
    """Create a SQLite database with the full schema in a temp file."""
    config = DatabaseConfiguration(
        url=f"sqlite+aiosqlite:///{tmp_path / 'evented.db'}",
        create_schema=True,
    )
    await config.on_startup()
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest_asyncio.fixture
async def session(database: DatabaseConfiguration):
    """Open a session on the test database."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def registry() -> EventTypeRegistry:
    """Create a registry holding the user and tally events."""
    registry = EventTypeRegistry().discover("evented.users")
    registry.register(Started, Incremented, Exploded)
    return registry


@pytest.fixture
def event_store(registry: EventTypeRegistry) -> EventStore:
    return EventStore(registry)


@pytest.fixture
def applier(database: DatabaseConfiguration, registry: EventTypeRegistry) -> EventApplier:
    """Create an event applier on the test database."""
    return EventApplier(database.session_factory, registry)


@pytest.fixture
def user_payload() -> dict[str, str]:
    return {"name": "Ongo", "email": "a@b.com", "password": "x"}


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Automatically clear execution context after each test."""
    yield
    from evented.context import clear_context

    clear_context()

"""SQLAlchemy integration for evented.

This module provides the database configuration used to build the async
engine and session factory the event applier runs on.

Installation:
    pip install evented            # SQLite via aiosqlite
    pip install evented[postgres]  # PostgreSQL via asyncpg

Usage:
    >>> from evented.integrations.sqlalchemy import DatabaseConfiguration
    >>>
    >>> config = DatabaseConfiguration(
    ...     url="postgresql+asyncpg://localhost/myapp",
    ...     create_schema=True,
    ... )
    >>> await config.on_startup()
    >>> applier = EventApplier(config.session_factory, registry)
"""

from .config import DatabaseConfiguration

__all__ = [
    "DatabaseConfiguration",
]

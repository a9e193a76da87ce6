"""
Database connection module.

Uses SQLAlchemy's asyncio extension over SQLite (aiosqlite driver).
The engine itself is owned by the StudentStore, which opens it once at
application startup and disposes it at shutdown.
"""

import os
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

# Read database URL from environment
# Falls back to a SQLite file in the working directory
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./database.db"


def get_database_url() -> str:
    """Return the configured database URL (read at call time)."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable WAL mode for SQLite (better concurrency between readers and the writer)."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for the given URL.

    SQLite connections get the WAL pragma on connect.
    """
    engine = create_async_engine(database_url, echo=False)
    if database_url.startswith("sqlite"):
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine


async def create_tables(engine: AsyncEngine):
    """
    Create all database tables if they are absent.
    There are no migrations; the schema is created on first startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

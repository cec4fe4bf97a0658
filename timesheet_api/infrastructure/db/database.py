"""
Database configuration and session management.
"""

from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine, async_sessionmaker, create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from timesheet_api.config import settings


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for ``url``."""
    engine = create_async_engine(url, poolclass=NullPool, echo=echo)

    if engine.dialect.name == "sqlite":
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINT behaves on SQLite
        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


# Create SQLAlchemy engine
engine = create_engine(settings.database_url_async, echo=settings.database_echo)

# Create SessionLocal class
SessionLocal = create_session_factory(engine)

# Create declarative base
Base = declarative_base()


def get_session_factory() -> async_sessionmaker:
    """
    Dependency returning the session factory used by units of work.
    Overridden in tests.
    """
    return SessionLocal


async def create_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables known to the metadata."""
    # Register the models on Base.metadata
    from timesheet_api.infrastructure.db import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Drop all tables known to the metadata."""
    from timesheet_api.infrastructure.db import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

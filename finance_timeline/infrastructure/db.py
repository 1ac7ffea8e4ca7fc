"""Database infrastructure for the finance timeline.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the events database, which holds both the event log
and the materialized views.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool

from finance_timeline.application.ports.database import DatabaseEnginePort
from finance_timeline.infrastructure.settings import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    TimelineSettings,
)


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(
    db_url: str,
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
) -> Engine:
    """Create a configured SQLAlchemy engine for the events database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)
        timeout_seconds: Bound on waits for a pooled connection, or the
            busy timeout for SQLite.

    Returns:
        Engine: A SQLAlchemy engine instance with health checks enabled.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        return create_engine(
            db_url,
            connect_args={"timeout": timeout_seconds},
            pool_pre_ping=True,
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_timeout=timeout_seconds,
        pool_pre_ping=True,
        future=True,
    )


_events_engine: Optional[Engine] = None


def get_events_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the events database.

    Returns:
        Engine: Lazily initialized engine connected to the events backend.
    """
    global _events_engine
    if _events_engine is None:
        db_url = _get_env_var("EVENTS_DB_URL")
        settings = TimelineSettings.from_env()
        _events_engine = _create_engine(db_url, settings.store_timeout_seconds)
    return _events_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so the store adapters depend only on the protocol.
    """

    def get_events_engine(self) -> Engine:
        """Get the engine for the events database.

        Returns:
            Engine: SQLAlchemy engine connected to the events database.
        """
        return get_events_engine()


__all__ = [
    "get_events_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]

"""Database port for the SQL-backed stores.

Infrastructure implementations provide the concrete engine; the store
adapters only depend on this protocol.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine holding events and materialized views."""

    def get_events_engine(self) -> Engine:
        """Get the engine for the events database.

        Returns:
            Engine: SQLAlchemy engine connected to the events database.
        """


__all__ = ["DatabaseEnginePort"]

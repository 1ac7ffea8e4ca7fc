"""SQLAlchemy-backed append-only event store."""

import json
from typing import Any

from sqlalchemy import BigInteger, Column, Integer, MetaData, Table, Text, text
from sqlalchemy.exc import SQLAlchemyError

from finance_timeline.application.ports.database import DatabaseEnginePort
from finance_timeline.application.ports.event_store import EventStorePort
from finance_timeline.domain.exceptions import StoreFailure
from finance_timeline.infrastructure.logging.logger import get_app_logger


metadata = MetaData()

events_table = Table(
    "events",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("type", Text, nullable=False),
    Column("timestamp", BigInteger, nullable=False),
    Column("payload", Text, nullable=False),
)

SELECT_EVENTS_SQL = text(
    """
    SELECT seq, type, timestamp, payload
    FROM events
    ORDER BY seq
    """
)

INSERT_EVENT_SQL = text(
    """
    INSERT INTO events (type, timestamp, payload)
    VALUES (:type, :timestamp, :payload)
    """
)

DELETE_EVENTS_SQL = "DELETE FROM events"


class SqlAlchemyEventStore(EventStorePort):
    """Event store writing one row per event, ordered by ``seq``."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the events engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def prepare_schema(self) -> None:
        """Ensure the events table exists."""
        try:
            events_table.create(
                self._db_port.get_events_engine(),
                checkfirst=True,
            )
        except SQLAlchemyError as exc:
            raise self._failure("prepare the events table", exc) from exc

    def append(self, records: list[dict[str, Any]]) -> None:
        """Insert every record in a single transaction.

        Args:
            records: Event records in append order.

        Raises:
            StoreFailure: If the transaction fails; nothing is written.
        """
        if not records:
            return
        payload = [
            {
                "type": record["type"],
                "timestamp": record["timestamp"],
                "payload": json.dumps(record, sort_keys=True),
            }
            for record in records
        ]
        try:
            engine = self._db_port.get_events_engine()
            with engine.begin() as conn:
                conn.execute(INSERT_EVENT_SQL, payload)
        except SQLAlchemyError as exc:
            raise self._failure(f"append {len(records)} events", exc) from exc

    def load(self) -> list[dict[str, Any]]:
        """Return every event record ordered by insertion."""
        try:
            engine = self._db_port.get_events_engine()
            with engine.connect() as conn:
                rows = conn.execute(SELECT_EVENTS_SQL).all()
        except SQLAlchemyError as exc:
            raise self._failure("load events", exc) from exc
        return [json.loads(row.payload) for row in rows]

    def clear(self) -> None:
        """Delete every stored event."""
        try:
            engine = self._db_port.get_events_engine()
            with engine.begin() as conn:
                conn.exec_driver_sql(DELETE_EVENTS_SQL)
        except SQLAlchemyError as exc:
            raise self._failure("clear events", exc) from exc

    def _failure(self, action: str, exc: SQLAlchemyError) -> StoreFailure:
        self._logger.error(f"Event store failed to {action}: {exc}")
        return StoreFailure(f"Event store failed to {action}: {exc}")


__all__ = ["SqlAlchemyEventStore", "events_table", "metadata"]

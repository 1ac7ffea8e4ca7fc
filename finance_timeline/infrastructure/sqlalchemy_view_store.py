"""SQLAlchemy-backed keyed store for materialized views."""

import json
from typing import Any

from sqlalchemy import Column, Table, Text, text
from sqlalchemy.exc import SQLAlchemyError

from finance_timeline.application.ports.database import DatabaseEnginePort
from finance_timeline.application.ports.view_store import ViewStorePort
from finance_timeline.domain.exceptions import StoreFailure
from finance_timeline.infrastructure.logging.logger import get_app_logger
from finance_timeline.infrastructure.sqlalchemy_event_store import metadata


view_state_table = Table(
    "view_state",
    metadata,
    Column("store_name", Text, primary_key=True),
    Column("view_key", Text, primary_key=True),
    Column("value", Text, nullable=False),
)

SELECT_VIEW_SQL = text(
    """
    SELECT value
    FROM view_state
    WHERE store_name = :store AND view_key = :key
    """
)

SELECT_KEYS_SQL = text(
    """
    SELECT view_key
    FROM view_state
    WHERE store_name = :store
    ORDER BY view_key
    """
)

DELETE_VIEW_SQL = text(
    """
    DELETE FROM view_state
    WHERE store_name = :store AND view_key = :key
    """
)

INSERT_VIEW_SQL = text(
    """
    INSERT INTO view_state (store_name, view_key, value)
    VALUES (:store, :key, :value)
    """
)

CLEAR_STORE_SQL = text("DELETE FROM view_state WHERE store_name = :store")


class SqlAlchemyViewStore(ViewStorePort):
    """View store holding one JSON blob per ``(store_name, view_key)`` row."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the events engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def prepare_schema(self) -> None:
        """Ensure the view_state table exists."""
        try:
            view_state_table.create(
                self._db_port.get_events_engine(),
                checkfirst=True,
            )
        except SQLAlchemyError as exc:
            raise self._failure("prepare the view_state table", exc) from exc

    def put(self, store: str, key: str, value: Any) -> None:
        """Replace the value under ``(store, key)`` in one transaction."""
        params = {"store": store, "key": key}
        try:
            engine = self._db_port.get_events_engine()
            with engine.begin() as conn:
                conn.execute(DELETE_VIEW_SQL, params)
                conn.execute(
                    INSERT_VIEW_SQL,
                    {**params, "value": json.dumps(value, sort_keys=True)},
                )
        except SQLAlchemyError as exc:
            raise self._failure(f"write {store}/{key}", exc) from exc

    def get(self, store: str, key: str) -> Any | None:
        try:
            engine = self._db_port.get_events_engine()
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_VIEW_SQL,
                    {"store": store, "key": key},
                ).first()
        except SQLAlchemyError as exc:
            raise self._failure(f"read {store}/{key}", exc) from exc
        return None if row is None else json.loads(row.value)

    def keys(self, store: str) -> list[str]:
        try:
            engine = self._db_port.get_events_engine()
            with engine.connect() as conn:
                rows = conn.execute(SELECT_KEYS_SQL, {"store": store}).all()
        except SQLAlchemyError as exc:
            raise self._failure(f"list keys of {store}", exc) from exc
        return [row.view_key for row in rows]

    def clear(self, store: str) -> None:
        try:
            engine = self._db_port.get_events_engine()
            with engine.begin() as conn:
                conn.execute(CLEAR_STORE_SQL, {"store": store})
        except SQLAlchemyError as exc:
            raise self._failure(f"clear {store}", exc) from exc

    def _failure(self, action: str, exc: SQLAlchemyError) -> StoreFailure:
        self._logger.error(f"View store failed to {action}: {exc}")
        return StoreFailure(f"View store failed to {action}: {exc}")


__all__ = ["SqlAlchemyViewStore", "view_state_table"]

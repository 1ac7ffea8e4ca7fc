"""Composition root for wiring infrastructure adapters."""

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.ports.database import DatabaseEnginePort
from finance_timeline.application.ports.event_store import EventStorePort
from finance_timeline.application.ports.view_store import ViewStorePort
from finance_timeline.application.view_materializer import ViewMaterializer
from finance_timeline.domain.services.clock import Clock
from finance_timeline.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from finance_timeline.infrastructure.logging.logger import get_app_logger
from finance_timeline.infrastructure.memory_stores import (
    InMemoryEventStore,
    InMemoryViewStore,
)
from finance_timeline.infrastructure.settings import (
    MEMORY_BACKEND,
    SQLALCHEMY_BACKEND,
    TimelineSettings,
)
from finance_timeline.infrastructure.sqlalchemy_event_store import (
    SqlAlchemyEventStore,
)
from finance_timeline.infrastructure.sqlalchemy_view_store import (
    SqlAlchemyViewStore,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def _resolve_backend(settings: TimelineSettings) -> str:
    if settings.backend not in (MEMORY_BACKEND, SQLALCHEMY_BACKEND):
        raise ValueError(f"Unsupported TIMELINE_BACKEND: {settings.backend}")
    return settings.backend


def build_event_store(
    settings: TimelineSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> EventStorePort:
    """Return the configured event store, with its schema prepared."""
    resolved = settings or TimelineSettings.from_env()
    if _resolve_backend(resolved) == MEMORY_BACKEND:
        return InMemoryEventStore()
    store = SqlAlchemyEventStore(
        db_port or build_database_adapter(),
        logger=get_app_logger(),
    )
    store.prepare_schema()
    return store


def build_view_store(
    settings: TimelineSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> ViewStorePort:
    """Return the configured view store, with its schema prepared."""
    resolved = settings or TimelineSettings.from_env()
    if _resolve_backend(resolved) == MEMORY_BACKEND:
        return InMemoryViewStore()
    store = SqlAlchemyViewStore(
        db_port or build_database_adapter(),
        logger=get_app_logger(),
    )
    store.prepare_schema()
    return store


def build_event_log(
    settings: TimelineSettings | None = None,
    store: EventStorePort | None = None,
    clock: Clock | None = None,
) -> EventLog:
    """Return an event log hydrated from the configured store."""
    resolved = settings or TimelineSettings.from_env()
    event_log = EventLog(
        store=store or build_event_store(resolved),
        clock=clock,
        logger=get_app_logger(),
    )
    event_log.load()
    return event_log


def build_view_materializer(
    event_log: EventLog,
    settings: TimelineSettings | None = None,
    view_store: ViewStorePort | None = None,
) -> ViewMaterializer:
    """Return a materializer, attached to the log when caching is enabled.

    Stored views are wiped and rebuilt from the log on startup.
    """
    resolved = settings or TimelineSettings.from_env()
    materializer = ViewMaterializer(
        event_log,
        view_store or build_view_store(resolved),
        request_id=resolved.request_id,
        logger=get_app_logger(),
    )
    if resolved.view_cache:
        materializer.refresh()
        materializer.attach()
    return materializer


__all__ = [
    "build_database_adapter",
    "build_event_store",
    "build_view_store",
    "build_event_log",
    "build_view_materializer",
]

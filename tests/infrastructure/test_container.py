"""Tests for the composition root."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

import finance_timeline.infrastructure.container as container_module
from finance_timeline.domain.models.events import ChangeCreated
from finance_timeline.infrastructure.memory_stores import (
    InMemoryEventStore,
    InMemoryViewStore,
)
from finance_timeline.infrastructure.settings import TimelineSettings
from finance_timeline.infrastructure.sqlalchemy_event_store import (
    SqlAlchemyEventStore,
)
from finance_timeline.infrastructure.sqlalchemy_view_store import (
    SqlAlchemyViewStore,
)


@pytest.fixture(autouse=True)
def _quiet_logger(monkeypatch):
    monkeypatch.setattr(container_module, "get_app_logger", lambda: MagicMock())


def test_memory_backend_builds_memory_stores() -> None:
    settings = TimelineSettings(backend="memory")

    assert isinstance(container_module.build_event_store(settings), InMemoryEventStore)
    assert isinstance(container_module.build_view_store(settings), InMemoryViewStore)


def test_sqlalchemy_backend_prepares_tables() -> None:
    """SQL stores are built on the injected port with their schema ready."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db_port = MagicMock()
    db_port.get_events_engine.return_value = engine
    settings = TimelineSettings(backend="sqlalchemy")

    event_store = container_module.build_event_store(settings, db_port=db_port)
    view_store = container_module.build_view_store(settings, db_port=db_port)

    assert isinstance(event_store, SqlAlchemyEventStore)
    assert isinstance(view_store, SqlAlchemyViewStore)
    assert event_store.load() == []
    assert view_store.keys("incomes_expenses") == []


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        container_module.build_event_store(TimelineSettings(backend="redis"))


def test_build_event_log_loads_existing_events() -> None:
    store = InMemoryEventStore()
    store.append([{"type": "ChangeCreated", "timestamp": 1, "changeId": "c1"}])

    event_log = container_module.build_event_log(TimelineSettings(), store=store)

    assert event_log.list() == [ChangeCreated(change_id="c1", timestamp=1)]


def test_build_view_materializer_attaches_when_cache_enabled() -> None:
    store = InMemoryEventStore()
    store.append([{"type": "ChangeCreated", "timestamp": 1, "changeId": "c1"}])
    event_log = container_module.build_event_log(TimelineSettings(), store=store)
    view_store = InMemoryViewStore()

    container_module.build_view_materializer(
        event_log,
        TimelineSettings(view_cache=True),
        view_store=view_store,
    )
    assert view_store.keys("incomes_expenses") == ["c1"]

    event_log.append([ChangeCreated(change_id="c2", timestamp=2)])
    assert view_store.keys("incomes_expenses") == ["c1", "c2"]


def test_build_view_materializer_without_cache_stays_detached() -> None:
    event_log = container_module.build_event_log(
        TimelineSettings(),
        store=InMemoryEventStore(),
    )
    view_store = InMemoryViewStore()

    container_module.build_view_materializer(
        event_log,
        TimelineSettings(view_cache=False),
        view_store=view_store,
    )
    event_log.append([ChangeCreated(change_id="c1", timestamp=1)])

    assert view_store.keys("incomes_expenses") == []

"""Tests for the infrastructure.db module."""

import pytest

from finance_timeline.infrastructure import db as db_module


def test_get_env_var_reads_environment(monkeypatch):
    """_get_env_var should load .env and return the requested value."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("EVENTS_DB_URL", "postgresql://example")

    assert db_module._get_env_var("EVENTS_DB_URL") == "postgresql://example"


def test_get_env_var_raises_when_missing(monkeypatch):
    """Missing env vars should raise a RuntimeError."""
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.delenv("EVENTS_DB_URL", raising=False)

    with pytest.raises(RuntimeError):
        db_module._get_env_var("EVENTS_DB_URL")


def test_create_engine_passes_pool_configuration(monkeypatch):
    """_create_engine should configure QueuePool with health checks."""
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["db_url"] = db_url
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    engine = db_module._create_engine("postgresql://events", 3.0)

    assert engine == "engine"
    assert captured["db_url"] == "postgresql://events"
    assert captured["kwargs"]["poolclass"] is db_module.QueuePool
    assert captured["kwargs"]["pool_size"] == 5
    assert captured["kwargs"]["max_overflow"] == 5
    assert captured["kwargs"]["pool_timeout"] == 3.0
    assert captured["kwargs"]["pool_pre_ping"] is True
    assert captured["kwargs"]["future"] is True


def test_create_engine_uses_busy_timeout_for_sqlite(monkeypatch):
    """SQLite engines get the store timeout as their busy timeout."""
    captured = {}

    def fake_create_engine(db_url, **kwargs):
        captured["kwargs"] = kwargs
        return "engine"

    monkeypatch.setattr(db_module, "create_engine", fake_create_engine)

    db_module._create_engine("sqlite:///events.db", 2.5)

    assert captured["kwargs"]["connect_args"] == {"timeout": 2.5}
    assert "poolclass" not in captured["kwargs"]


def test_get_events_engine_caches_engine(monkeypatch):
    """get_events_engine should memoize the created engine."""
    monkeypatch.setattr(db_module, "_events_engine", None)
    created = []

    def fake_create_engine(url, timeout_seconds):
        created.append((url, timeout_seconds))
        return f"engine:{url}"

    monkeypatch.setattr(db_module, "_create_engine", fake_create_engine)
    monkeypatch.setattr(db_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setenv("EVENTS_DB_URL", "postgresql://events")
    monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "7")

    engine_one = db_module.get_events_engine()
    engine_two = db_module.get_events_engine()

    assert engine_one is engine_two
    assert engine_one == "engine:postgresql://events"
    assert created == [("postgresql://events", 7.0)]


def test_adapter_returns_underlying_engine(monkeypatch):
    """SqlAlchemyDatabaseEngineAdapter should proxy the global helper."""
    monkeypatch.setattr(db_module, "get_events_engine", lambda: "events_engine")

    adapter = db_module.SqlAlchemyDatabaseEngineAdapter()

    assert adapter.get_events_engine() == "events_engine"

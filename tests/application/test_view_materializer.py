"""Tests for the materialized view cache."""

import threading
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

import finance_timeline.application.use_cases.change_commands as change_commands_module
from finance_timeline.application.event_log import EventLog
from finance_timeline.application.use_cases.cancel_change import (
    CancelChangeUseCase,
)
from finance_timeline.application.use_cases.commit_change import (
    CommitChangeUseCase,
)
from finance_timeline.application.use_cases.create_change import (
    CreateChangeUseCase,
)
from finance_timeline.application.use_cases.publish_change import (
    PublishChangeUseCase,
)
from finance_timeline.application.view_materializer import ViewMaterializer
from finance_timeline.domain.models.commands import EntryDraft
from finance_timeline.domain.services.clock import FixedClock
from finance_timeline.infrastructure.memory_stores import InMemoryViewStore


@pytest.fixture(autouse=True)
def _silence_usage_log(monkeypatch):
    monkeypatch.setattr(
        change_commands_module,
        "get_usage_logger",
        lambda: MagicMock(),
    )


@pytest.fixture
def setup():
    event_log = EventLog(clock=FixedClock(0), logger=MagicMock())
    view_store = InMemoryViewStore()
    materializer = ViewMaterializer(event_log, view_store, logger=MagicMock())
    return event_log, view_store, materializer


def _change(event_log: EventLog, change_id: str, draft: EntryDraft) -> str:
    CreateChangeUseCase(
        event_log,
        id_factory=lambda: change_id,
        logger=MagicMock(),
    ).execute()
    CommitChangeUseCase(event_log, logger=MagicMock()).execute(change_id, [draft])
    return change_id


def test_attached_materializer_rewrites_views_on_every_append(setup) -> None:
    """Views follow the log and are replaced, never merged."""
    event_log, view_store, materializer = setup
    materializer.attach()

    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 500, "Salary", "2025-01", "2025-03"),
    )
    PublishChangeUseCase(event_log, logger=MagicMock()).execute("0x00000001")
    _change(
        event_log,
        "0x00000002",
        EntryDraft("expense", 200, "Rent", "2025-02", "2025-04"),
    )

    assert view_store.keys("incomes_expenses") == ["0x00000001", "0x00000002"]
    assert view_store.keys("cumulative_finances") == ["0x00000001"]
    draft_view = materializer.change_finances("0x00000002")
    assert draft_view["2025-04"].net == Decimal("-200")
    assert "2025-01" not in draft_view

    CancelChangeUseCase(event_log, logger=MagicMock()).execute("0x00000002")

    assert materializer.change_finances("0x00000002") == {}
    assert view_store.keys("cumulative_finances") == ["0x00000001", "0x00000002"]
    assert materializer.version_finances("0x00000002") == {}
    assert sorted(materializer.version_finances("0x00000001")) == [
        "2025-01",
        "2025-02",
        "2025-03",
    ]


def test_detached_materializer_computes_without_caching(setup) -> None:
    event_log, view_store, materializer = setup
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    PublishChangeUseCase(event_log, logger=MagicMock()).execute("0x00000001")

    finances = materializer.version_finances("0x00000001")

    assert finances["2025-05"].net == Decimal("100")
    assert view_store.keys("cumulative_finances") == []
    assert materializer.version_finances("0xffffffff") is None


def test_detached_reads_follow_later_commits(setup) -> None:
    """A read between two commits must not pin the first result."""
    event_log, view_store, materializer = setup
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    assert materializer.change_finances("0x00000001")["2025-05"].net == Decimal(
        "100"
    )

    CommitChangeUseCase(event_log, logger=MagicMock()).execute(
        "0x00000001",
        [EntryDraft("income", 50, "Bonus", "2025-05", "2025-05")],
    )

    assert materializer.change_finances("0x00000001")["2025-05"].net == Decimal(
        "150"
    )
    assert view_store.keys("incomes_expenses") == []


def test_attached_materializer_stores_on_cache_miss(setup) -> None:
    event_log, view_store, materializer = setup
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    materializer.attach()

    assert materializer.change_finances("0x00000001")["2025-05"].net == Decimal(
        "100"
    )
    assert view_store.keys("incomes_expenses") == ["0x00000001"]


def test_detach_and_reset(setup) -> None:
    event_log, view_store, materializer = setup
    materializer.attach()
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    materializer.detach()
    materializer.reset()

    _change(
        event_log,
        "0x00000002",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )

    assert view_store.keys("incomes_expenses") == []


def test_refresh_counts_written_views(setup) -> None:
    event_log, _, materializer = setup
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    PublishChangeUseCase(event_log, logger=MagicMock()).execute("0x00000001")

    assert materializer.refresh() == 2


class _StallingViewStore(InMemoryViewStore):
    """Blocks the first ``clear`` until released, to interleave refreshes."""

    def __init__(self) -> None:
        super().__init__()
        self.stalled = threading.Event()
        self.release = threading.Event()
        self._stall_once = True

    def clear(self, store: str) -> None:
        if self._stall_once:
            self._stall_once = False
            self.stalled.set()
            self.release.wait(timeout=0.5)
        super().clear(store)


def test_overlapping_refreshes_end_with_latest_log() -> None:
    """A slow refresh must not overwrite views written from a newer log."""
    event_log = EventLog(clock=FixedClock(0), logger=MagicMock())
    view_store = _StallingViewStore()
    materializer = ViewMaterializer(event_log, view_store, logger=MagicMock())
    _change(
        event_log,
        "0x00000001",
        EntryDraft("income", 100, "Gift", "2025-05", "2025-05"),
    )
    materializer.attach()

    slow_refresh = threading.Thread(target=materializer.refresh)
    slow_refresh.start()
    assert view_store.stalled.wait(timeout=1)

    def _append_second_change() -> None:
        _change(
            event_log,
            "0x00000002",
            EntryDraft("expense", 40, "Gas", "2025-05", "2025-05"),
        )
        view_store.release.set()

    appender = threading.Thread(target=_append_second_change)
    appender.start()
    slow_refresh.join(timeout=5)
    appender.join(timeout=5)

    assert view_store.keys("incomes_expenses") == ["0x00000001", "0x00000002"]
    assert materializer.change_finances("0x00000002")["2025-05"].net == Decimal(
        "-40"
    )

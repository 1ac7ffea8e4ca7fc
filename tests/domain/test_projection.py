"""Tests for the projection engine."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finance_timeline.domain.models.events import (
    ChangeCancelled,
    ChangeCreated,
    ChangePublished,
    ExpenseAdded,
    IncomeAdded,
    Period,
    RequestCreated,
)
from finance_timeline.domain.models.finance import ProjectionScope
from finance_timeline.domain.services.projection import (
    filter_finances,
    reduce_events,
)


REQUEST = "0x01"


def _income(amount, change_id, start, end, timestamp, description="Salary"):
    return IncomeAdded(
        amount=Decimal(amount),
        description=description,
        belongs_to=change_id,
        period=Period(start=start, end=end),
        timestamp=timestamp,
    )


def _expense(amount, change_id, start, end, timestamp, description="Rent"):
    return ExpenseAdded(
        amount=Decimal(amount),
        description=description,
        belongs_to=change_id,
        period=Period(start=start, end=end),
        timestamp=timestamp,
    )


def _mixed_log():
    return [
        RequestCreated(request_id=REQUEST, timestamp=1),
        _income("1000", REQUEST, date(2025, 1, 1), date(2025, 2, 1), 2),
        ChangeCreated(change_id="c1", timestamp=3),
        _income("500", "c1", date(2025, 1, 1), date(2025, 3, 1), 4),
        _expense("120.50", "c1", date(2025, 2, 1), date(2025, 2, 1), 4),
        ChangePublished(change_id="c1", timestamp=5),
        ChangeCreated(change_id="c2", timestamp=6),
        _expense("200", "c2", date(2025, 1, 1), date(2025, 4, 1), 7),
        ChangeCancelled(change_id="c2", timestamp=8),
        ChangeCreated(change_id="c3", timestamp=9),
        _expense("75", "c3", date(2025, 3, 1), date(2025, 3, 1), 10),
    ]


def test_published_change_scenario_fills_each_month() -> None:
    """A 3-month income shows up in each month with the published status."""
    events = [
        ChangeCreated(change_id="c1", timestamp=1),
        _income("500", "c1", date(2025, 1, 1), date(2025, 3, 1), 2),
        ChangePublished(change_id="c1", timestamp=3),
    ]

    projection = reduce_events(
        events,
        ProjectionScope(request_id=REQUEST, active_change_id="c1"),
    )

    assert sorted(projection.finances) == ["2025-01", "2025-02", "2025-03"]
    for bucket in projection.finances.values():
        assert [entry.amount for entry in bucket.incomes] == [Decimal("500")]
        assert bucket.expenses == ()
        assert bucket.net == Decimal("500")
    assert projection.change_status == "published"
    assert projection.change_id == "c1"
    assert projection.version == 3
    assert projection.timestamp == 3


def test_reduce_is_deterministic() -> None:
    """Folding the same events twice yields identical finances."""
    scope = ProjectionScope(
        request_id=REQUEST,
        active_change_id="c3",
        included_changes=frozenset({"c1", "c2"}),
    )

    first = reduce_events(_mixed_log(), scope)
    second = reduce_events(_mixed_log(), scope)

    assert first == second


def test_cancelled_change_contributes_nothing_even_when_included() -> None:
    """Entries of a cancelled change never reach any bucket."""
    for scope in (
        ProjectionScope(request_id=REQUEST, active_change_id="c2"),
        ProjectionScope(
            request_id=REQUEST,
            active_change_id="c3",
            included_changes=frozenset({"c1", "c2"}),
        ),
    ):
        projection = reduce_events(_mixed_log(), scope)

        for bucket in projection.finances.values():
            entries = bucket.incomes + bucket.expenses
            assert all(entry.change_id != "c2" for entry in entries)


def test_cancelled_active_change_reports_cancelled_status() -> None:
    """Viewing a cancelled change shows its status and request entries only."""
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(request_id=REQUEST, active_change_id="c2"),
    )

    assert projection.change_status == "cancelled"
    assert sorted(projection.finances) == ["2025-01", "2025-02"]


def test_cancelled_active_change_ignores_included_published_changes() -> None:
    """Replaying a cancelled version shows no change entries at all."""
    events = [
        ChangeCreated(change_id="c1", timestamp=1),
        _income("500", "c1", date(2025, 1, 1), date(2025, 1, 1), 2),
        ChangePublished(change_id="c1", timestamp=3),
        ChangeCreated(change_id="c2", timestamp=4),
        _expense("200", "c2", date(2025, 1, 1), date(2025, 1, 1), 5),
        ChangeCancelled(change_id="c2", timestamp=6),
    ]

    projection = reduce_events(
        events,
        ProjectionScope(
            request_id=REQUEST,
            active_change_id="c2",
            included_changes=frozenset({"c1", "c2"}),
        ),
    )

    assert projection.finances == {}
    assert projection.change_status == "cancelled"


def test_request_entries_survive_a_cancelled_active_change() -> None:
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(
            request_id=REQUEST,
            active_change_id="c2",
            included_changes=frozenset({"c1", "c2"}),
        ),
    )

    entries = [
        entry
        for bucket in projection.finances.values()
        for entry in bucket.incomes + bucket.expenses
    ]
    assert {entry.change_id for entry in entries} == {REQUEST}
    assert projection.finances["2025-01"].net == Decimal("1000")


def test_net_equals_incomes_minus_expenses() -> None:
    """Every bucket's net is the exact difference of its entries."""
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(
            request_id=REQUEST,
            active_change_id="c3",
            included_changes=frozenset({"c1"}),
        ),
    )

    for bucket in projection.finances.values():
        incomes = sum((e.amount for e in bucket.incomes), Decimal("0"))
        expenses = sum((e.amount for e in bucket.expenses), Decimal("0"))
        assert bucket.net == incomes - expenses
    assert projection.finances["2025-02"].net == Decimal("1379.50")
    assert projection.finances["2025-03"].net == Decimal("425")


def test_request_entries_are_always_visible() -> None:
    """Request-owned entries apply even without an active change."""
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(request_id=REQUEST),
    )

    assert sorted(projection.finances) == ["2025-01", "2025-02"]
    assert projection.finances["2025-01"].net == Decimal("1000")
    assert projection.change_status == "completed"


def test_draft_active_change_has_draft_status() -> None:
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(request_id=REQUEST, active_change_id="c3"),
    )

    assert projection.change_status == "draft"
    assert projection.finances["2025-03"].net == Decimal("-75")


def test_malformed_period_is_skipped_with_warning() -> None:
    """Unreadable or inverted periods are logged and skipped."""
    logger = MagicMock()
    events = [
        ChangeCreated(change_id="c1", timestamp=1),
        _income("10", "c1", "not-a-date", "2025-01-01", 2),
        _income("20", "c1", date(2025, 5, 1), date(2025, 4, 1), 2),
        _income("30", "c1", "2025-06-15", "2025-06-30", 3),
    ]

    projection = reduce_events(
        events,
        ProjectionScope(request_id=REQUEST, active_change_id="c1"),
        logger=logger,
    )

    assert list(projection.finances) == ["2025-06"]
    assert logger.warning.call_count == 2


def test_iso_datetime_bounds_are_bucketed_in_utc() -> None:
    """Aware datetimes are normalised to UTC before taking the month."""
    events = [
        _income(
            "10",
            REQUEST,
            "2025-01-31T23:30:00-02:00",
            "2025-02-01T00:00:00Z",
            1,
        ),
    ]

    projection = reduce_events(events, ProjectionScope(request_id=REQUEST))

    assert list(projection.finances) == ["2025-02"]


def test_unknown_event_raises_type_error() -> None:
    """Fold sites reject objects outside the event union."""
    with pytest.raises(TypeError, match="Unsupported event"):
        reduce_events([object()], ProjectionScope(request_id=REQUEST))


def test_filter_finances_keeps_requested_changes() -> None:
    """filter_finances recomputes net and drops emptied months."""
    projection = reduce_events(
        _mixed_log(),
        ProjectionScope(
            request_id=REQUEST,
            active_change_id="c3",
            included_changes=frozenset({"c1"}),
        ),
    )

    filtered = filter_finances(projection.finances, ["c3"])

    assert list(filtered) == ["2025-03"]
    assert filtered["2025-03"].net == Decimal("-75")
    assert filtered["2025-03"].incomes == ()

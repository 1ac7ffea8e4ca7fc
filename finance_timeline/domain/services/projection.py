"""Projection engine folding events into monthly finances."""

from collections.abc import Iterable
from decimal import Decimal
import logging
from logging import Logger

from finance_timeline.domain.constants import (
    CANCELLED,
    COMPLETED,
    DRAFT,
    EXPENSE,
    INCOME,
    PUBLISHED,
    ProjectionStatus,
)
from finance_timeline.domain.exceptions import MalformedPeriod
from finance_timeline.domain.models.events import (
    ChangeCancelled,
    ChangeCreated,
    ChangePublished,
    EntryRemoved,
    Event,
    ExpenseAdded,
    IncomeAdded,
    RequestCreated,
)
from finance_timeline.domain.models.finance import (
    Entry,
    MonthlyBucket,
    MonthlyFinances,
    Projection,
    ProjectionScope,
)
from finance_timeline.domain.services.calendar import expand_period, month_key


class _BucketBuilder:
    """Mutable month accumulator frozen into a MonthlyBucket at the end."""

    def __init__(self) -> None:
        self.incomes: list[Entry] = []
        self.expenses: list[Entry] = []
        self.net = Decimal("0")

    def add(self, entry: Entry) -> None:
        if entry.kind == INCOME:
            self.incomes.append(entry)
            self.net += entry.amount
        else:
            self.expenses.append(entry)
            self.net -= entry.amount

    def freeze(self) -> MonthlyBucket:
        return MonthlyBucket(
            incomes=tuple(self.incomes),
            expenses=tuple(self.expenses),
            net=self.net,
        )


def reduce_events(
    events: Iterable[Event],
    scope: ProjectionScope,
    logger: Logger | None = None,
) -> Projection:
    """Fold events into the monthly finances visible in ``scope``.

    Entries belonging to the request itself are always applied. Entries of
    a change are applied when the change is the active one or part of
    ``scope.included_changes``, unless that change was cancelled: a
    cancellation voids every entry the change contributed. When the active
    change itself is cancelled, only the request entries are applied.

    Args:
        events: Event log in append order.
        scope: Request, active change and included changes to fold.
        logger: Logger used for malformed period warnings.

    Returns:
        Projection: Monthly finances, change status, event count and the
        latest event timestamp.
    """
    log = logger or logging.getLogger(__name__)
    events = list(events)
    cancelled_changes = {
        event.change_id for event in events if isinstance(event, ChangeCancelled)
    }
    months: dict[str, _BucketBuilder] = {}
    request_only = scope.active_change_id in cancelled_changes
    active_cancelled = False
    active_published = False
    latest_timestamp = 0

    for event in events:
        if isinstance(event, (IncomeAdded, ExpenseAdded)):
            if _is_visible(
                event.belongs_to, scope, cancelled_changes, request_only
            ):
                _apply_entry(event, months, log)
        elif isinstance(event, ChangeCancelled):
            if event.change_id == scope.active_change_id:
                active_cancelled = True
        elif isinstance(event, ChangePublished):
            if event.change_id == scope.active_change_id:
                active_published = True
        elif not isinstance(event, (RequestCreated, ChangeCreated, EntryRemoved)):
            raise TypeError(f"Unsupported event: {event!r}")
        latest_timestamp = max(latest_timestamp, event.timestamp)

    return Projection(
        finances={key: builder.freeze() for key, builder in months.items()},
        request_id=scope.request_id,
        change_id=scope.active_change_id,
        change_status=_resolve_status(
            scope.active_change_id,
            active_cancelled,
            active_published,
        ),
        version=len(events),
        timestamp=latest_timestamp,
    )


def _is_visible(
    belongs_to: str,
    scope: ProjectionScope,
    cancelled_changes: set[str],
    request_only: bool,
) -> bool:
    if belongs_to == scope.request_id:
        return True
    if request_only or belongs_to in cancelled_changes:
        return False
    return scope.includes(belongs_to)


def _apply_entry(
    event: IncomeAdded | ExpenseAdded,
    months: dict[str, _BucketBuilder],
    logger,
) -> None:
    try:
        anchors = expand_period(event.period)
    except MalformedPeriod as exc:
        logger.warning(
            f"Skipping {event.event_type} '{event.description}' "
            f"for {event.belongs_to}: {exc}"
        )
        return
    kind = INCOME if isinstance(event, IncomeAdded) else EXPENSE
    entry = Entry(
        amount=event.amount,
        description=event.description,
        kind=kind,
        change_id=event.belongs_to,
    )
    for anchor in anchors:
        months.setdefault(month_key(anchor), _BucketBuilder()).add(entry)


def _resolve_status(
    active_change_id: str | None,
    cancelled: bool,
    published: bool,
) -> ProjectionStatus:
    if cancelled:
        return CANCELLED
    if published:
        return PUBLISHED
    if active_change_id:
        return DRAFT
    return COMPLETED


def filter_finances(
    finances: MonthlyFinances,
    change_ids: Iterable[str],
) -> MonthlyFinances:
    """Keep only entries of ``change_ids`` and recompute each month's net.

    Months left without entries are dropped.
    """
    allowed = set(change_ids)
    result: MonthlyFinances = {}
    for key, bucket in finances.items():
        incomes = tuple(e for e in bucket.incomes if e.change_id in allowed)
        expenses = tuple(e for e in bucket.expenses if e.change_id in allowed)
        if not incomes and not expenses:
            continue
        net = sum((e.amount for e in incomes), Decimal("0")) - sum(
            (e.amount for e in expenses), Decimal("0")
        )
        result[key] = MonthlyBucket(incomes=incomes, expenses=expenses, net=net)
    return result


__all__ = ["reduce_events", "filter_finances"]

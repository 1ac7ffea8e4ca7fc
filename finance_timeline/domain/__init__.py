"""Domain package for the change timeline: events, rules and projections."""

from .aggregates import ChangeAggregate
from .constants import DEFAULT_REQUEST_ID
from .exceptions import (
    CommandRejected,
    FinanceTimelineError,
    GuardViolation,
    InvalidCommand,
    MalformedEventRecord,
    MalformedPeriod,
    StoreFailure,
    UnknownEventType,
)
from .models import (
    ChangeCancelled,
    ChangeCreated,
    ChangePublished,
    Entry,
    EntryDraft,
    EntryRemoved,
    Event,
    ExpenseAdded,
    IncomeAdded,
    MonthlyBucket,
    MonthlyFinances,
    Period,
    Projection,
    ProjectionScope,
    RequestCreated,
    VersionInfo,
)
from .services import VersionIndex, filter_finances, reduce_events

__all__ = [
    "ChangeAggregate",
    "DEFAULT_REQUEST_ID",
    "CommandRejected",
    "FinanceTimelineError",
    "GuardViolation",
    "InvalidCommand",
    "MalformedEventRecord",
    "MalformedPeriod",
    "StoreFailure",
    "UnknownEventType",
    "ChangeCancelled",
    "ChangeCreated",
    "ChangePublished",
    "Entry",
    "EntryDraft",
    "EntryRemoved",
    "Event",
    "ExpenseAdded",
    "IncomeAdded",
    "MonthlyBucket",
    "MonthlyFinances",
    "Period",
    "Projection",
    "ProjectionScope",
    "RequestCreated",
    "VersionInfo",
    "VersionIndex",
    "filter_finances",
    "reduce_events",
]

"""Domain models package."""

from .commands import EntryDraft
from .events import (
    EVENT_TYPES,
    ChangeCancelled,
    ChangeCreated,
    ChangePublished,
    EntryEvent,
    EntryRemoved,
    Event,
    ExpenseAdded,
    IncomeAdded,
    Period,
    RequestCreated,
    event_belongs_to,
)
from .finance import (
    Entry,
    MonthlyBucket,
    MonthlyFinances,
    Projection,
    ProjectionScope,
)
from .versions import VersionInfo

__all__ = [
    "EntryDraft",
    "EVENT_TYPES",
    "ChangeCancelled",
    "ChangeCreated",
    "ChangePublished",
    "EntryEvent",
    "EntryRemoved",
    "Event",
    "ExpenseAdded",
    "IncomeAdded",
    "Period",
    "RequestCreated",
    "event_belongs_to",
    "Entry",
    "MonthlyBucket",
    "MonthlyFinances",
    "Projection",
    "ProjectionScope",
    "VersionInfo",
]

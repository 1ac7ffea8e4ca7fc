"""Domain events appended to the change timeline.

Every event is immutable once appended and carries ``timestamp`` in
milliseconds since the epoch. ``Event`` is the closed union of the seven
variants below; fold sites dispatch on the concrete class.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Union


@dataclass(frozen=True)
class Period:
    """Inclusive period covered by an income or expense.

    Bounds are dates when they could be parsed; decoded records with
    unreadable bounds keep the raw text so projections can skip them.
    """

    start: date | str
    end: date | str


@dataclass(frozen=True)
class RequestCreated:
    event_type: ClassVar[str] = "RequestCreated"

    request_id: str
    timestamp: int


@dataclass(frozen=True)
class ChangeCreated:
    event_type: ClassVar[str] = "ChangeCreated"

    change_id: str
    timestamp: int


@dataclass(frozen=True)
class IncomeAdded:
    event_type: ClassVar[str] = "IncomeAdded"

    amount: Decimal
    description: str
    belongs_to: str
    period: Period
    timestamp: int


@dataclass(frozen=True)
class ExpenseAdded:
    event_type: ClassVar[str] = "ExpenseAdded"

    amount: Decimal
    description: str
    belongs_to: str
    period: Period
    timestamp: int


@dataclass(frozen=True)
class EntryRemoved:
    """Reserved: declared in the log format but never applied to views."""

    event_type: ClassVar[str] = "EntryRemoved"

    index: int
    belongs_to: str
    timestamp: int


@dataclass(frozen=True)
class ChangeCancelled:
    event_type: ClassVar[str] = "ChangeCancelled"

    change_id: str
    timestamp: int


@dataclass(frozen=True)
class ChangePublished:
    event_type: ClassVar[str] = "ChangePublished"

    change_id: str
    timestamp: int


Event = Union[
    RequestCreated,
    ChangeCreated,
    IncomeAdded,
    ExpenseAdded,
    EntryRemoved,
    ChangeCancelled,
    ChangePublished,
]

EVENT_TYPES: tuple[type, ...] = (
    RequestCreated,
    ChangeCreated,
    IncomeAdded,
    ExpenseAdded,
    EntryRemoved,
    ChangeCancelled,
    ChangePublished,
)

EntryEvent = Union[IncomeAdded, ExpenseAdded]


def event_belongs_to(event: Event) -> str | None:
    """Return the change (or request) id an entry event belongs to."""
    if isinstance(event, (IncomeAdded, ExpenseAdded, EntryRemoved)):
        return event.belongs_to
    if isinstance(
        event,
        (RequestCreated, ChangeCreated, ChangeCancelled, ChangePublished),
    ):
        return None
    raise TypeError(f"Unsupported event: {event!r}")


__all__ = [
    "Period",
    "RequestCreated",
    "ChangeCreated",
    "IncomeAdded",
    "ExpenseAdded",
    "EntryRemoved",
    "ChangeCancelled",
    "ChangePublished",
    "Event",
    "EntryEvent",
    "EVENT_TYPES",
    "event_belongs_to",
]

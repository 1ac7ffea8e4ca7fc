"""Record codecs for persisted events and materialized views.

Event records follow the storage-independent shape
``{"type": str, "timestamp": int, ...fields}`` with camelCase field names.
"""

from datetime import date
from typing import Any

from finance_timeline.domain.exceptions import (
    MalformedEventRecord,
    UnknownEventType,
)
from finance_timeline.domain.models.events import (
    ChangeCancelled,
    ChangeCreated,
    ChangePublished,
    EntryRemoved,
    Event,
    ExpenseAdded,
    IncomeAdded,
    Period,
    RequestCreated,
)
from finance_timeline.domain.models.finance import (
    Entry,
    MonthlyBucket,
    MonthlyFinances,
)
from finance_timeline.domain.services.calendar import parse_period_bound
from finance_timeline.utils.decimal_utils import coerce_decimal, decimal_to_json


def _encode_bound(value: date | str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _decode_bound(value: Any) -> date | str:
    parsed = parse_period_bound(value)
    return parsed if parsed is not None else str(value)


def event_to_record(event: Event) -> dict[str, Any]:
    """Return the persisted record for an event."""
    record: dict[str, Any] = {
        "type": event.event_type,
        "timestamp": int(event.timestamp),
    }
    if isinstance(event, RequestCreated):
        record["requestId"] = event.request_id
    elif isinstance(event, (ChangeCreated, ChangeCancelled, ChangePublished)):
        record["changeId"] = event.change_id
    elif isinstance(event, (IncomeAdded, ExpenseAdded)):
        record["amount"] = decimal_to_json(event.amount)
        record["description"] = event.description
        record["belongsTo"] = event.belongs_to
        record["period"] = {
            "start": _encode_bound(event.period.start),
            "end": _encode_bound(event.period.end),
        }
    elif isinstance(event, EntryRemoved):
        record["index"] = event.index
        record["belongsTo"] = event.belongs_to
    else:
        raise TypeError(f"Unsupported event: {event!r}")
    return record


def event_from_record(record: dict[str, Any]) -> Event:
    """Rebuild an event from its persisted record.

    Raises:
        UnknownEventType: If ``type`` is not one of the event variants.
        MalformedEventRecord: If a required field is missing or invalid.
    """
    event_type = record.get("type")
    try:
        timestamp = int(record["timestamp"])
        if event_type == RequestCreated.event_type:
            return RequestCreated(
                request_id=str(record["requestId"]),
                timestamp=timestamp,
            )
        if event_type == ChangeCreated.event_type:
            return ChangeCreated(change_id=str(record["changeId"]), timestamp=timestamp)
        if event_type == ChangePublished.event_type:
            return ChangePublished(
                change_id=str(record["changeId"]),
                timestamp=timestamp,
            )
        if event_type == ChangeCancelled.event_type:
            return ChangeCancelled(
                change_id=str(record["changeId"]),
                timestamp=timestamp,
            )
        if event_type in (IncomeAdded.event_type, ExpenseAdded.event_type):
            event_cls = IncomeAdded if event_type == IncomeAdded.event_type else ExpenseAdded
            period = record["period"]
            return event_cls(
                amount=coerce_decimal(record["amount"]),
                description=str(record.get("description") or ""),
                belongs_to=str(record["belongsTo"]),
                period=Period(
                    start=_decode_bound(period["start"]),
                    end=_decode_bound(period["end"]),
                ),
                timestamp=timestamp,
            )
        if event_type == EntryRemoved.event_type:
            return EntryRemoved(
                index=int(record["index"]),
                belongs_to=str(record["belongsTo"]),
                timestamp=timestamp,
            )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedEventRecord(
            f"Invalid {event_type} record {record!r}: {exc}"
        ) from exc
    raise UnknownEventType(event_type)


def _entry_to_record(entry: Entry) -> dict[str, Any]:
    return {
        "amount": decimal_to_json(entry.amount),
        "description": entry.description,
        "kind": entry.kind,
        "changeId": entry.change_id,
    }


def _entry_from_record(record: dict[str, Any]) -> Entry:
    return Entry(
        amount=coerce_decimal(record["amount"]),
        description=record["description"],
        kind=record["kind"],
        change_id=record["changeId"],
    )


def finances_to_record(finances: MonthlyFinances) -> dict[str, Any]:
    """Return a JSON-safe blob for a monthly finances view."""
    return {
        key: {
            "incomes": [_entry_to_record(e) for e in bucket.incomes],
            "expenses": [_entry_to_record(e) for e in bucket.expenses],
            "net": decimal_to_json(bucket.net),
        }
        for key, bucket in finances.items()
    }


def finances_from_record(record: dict[str, Any]) -> MonthlyFinances:
    """Rebuild a monthly finances view from its stored blob."""
    return {
        key: MonthlyBucket(
            incomes=tuple(_entry_from_record(e) for e in value["incomes"]),
            expenses=tuple(_entry_from_record(e) for e in value["expenses"]),
            net=coerce_decimal(value["net"]),
        )
        for key, value in record.items()
    }


__all__ = [
    "event_to_record",
    "event_from_record",
    "finances_to_record",
    "finances_from_record",
]

"""State machine gating the commands allowed on a change."""

from collections.abc import Iterable

from finance_timeline.domain.constants import (
    CANCELLED,
    DRAFT,
    PUBLISHED,
    ChangeStatus,
)
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


class ChangeAggregate:
    """Per-change state rebuilt by folding the whole event log.

    States are ``draft`` (initial), ``published`` and ``cancelled``; the
    last two are terminal and ignore any later publish/cancel event.
    """

    def __init__(self, change_id: str) -> None:
        self.change_id = change_id
        self.status: ChangeStatus = DRAFT
        self.committed_event_count = 0
        self.exists = False

    @classmethod
    def from_events(
        cls,
        change_id: str,
        events: Iterable[Event],
    ) -> "ChangeAggregate":
        aggregate = cls(change_id)
        for event in events:
            aggregate.apply(event)
        return aggregate

    def apply(self, event: Event) -> None:
        if isinstance(event, (IncomeAdded, ExpenseAdded, EntryRemoved)):
            if event.belongs_to == self.change_id:
                self.committed_event_count += 1
        elif isinstance(event, ChangeCreated):
            if event.change_id == self.change_id:
                self.exists = True
        elif isinstance(event, ChangePublished):
            if event.change_id == self.change_id and self.status == DRAFT:
                self.status = PUBLISHED
        elif isinstance(event, ChangeCancelled):
            if event.change_id == self.change_id and self.status == DRAFT:
                self.status = CANCELLED
        elif isinstance(event, RequestCreated):
            pass
        else:
            raise TypeError(f"Unsupported event: {event!r}")

    def can_add_item(self) -> bool:
        return self.status == DRAFT

    def can_commit(self) -> bool:
        return self.status == DRAFT

    def can_publish(self) -> bool:
        return self.status == DRAFT and self.committed_event_count > 0

    def can_cancel(self) -> bool:
        return self.status == DRAFT and self.committed_event_count > 0

    def __repr__(self) -> str:
        return (
            f"ChangeAggregate(change_id={self.change_id!r}, "
            f"status={self.status!r}, "
            f"committed_event_count={self.committed_event_count})"
        )


__all__ = ["ChangeAggregate"]

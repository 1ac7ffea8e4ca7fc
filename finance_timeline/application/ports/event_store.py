"""Port for the durable, append-only event store."""

from typing import Any, Protocol


class EventStorePort(Protocol):
    """Port exposing ordered, durable storage of event records.

    Records follow the ``{type, timestamp, ...fields}`` shape produced by
    ``event_to_record``. Implementations raise StoreFailure when the
    underlying storage is unavailable.
    """

    def append(self, records: list[dict[str, Any]]) -> None:
        """Persist records after every previously appended record."""

    def load(self) -> list[dict[str, Any]]:
        """Return every persisted record in append order."""

    def clear(self) -> None:
        """Remove every persisted record."""


__all__ = ["EventStorePort"]

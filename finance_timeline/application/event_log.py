"""Append-only event log with synchronous change notifications.

The log is the only source of truth: aggregates, projections and version
history are all recomputed from ``list()``. An instance is created at
session start (``load()`` hydrates it from the store) and torn down with
``close()``.
"""

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
import threading

from finance_timeline.application.ports.event_store import EventStorePort
from finance_timeline.domain.exceptions import StoreFailure
from finance_timeline.domain.models.events import Event
from finance_timeline.domain.services.clock import Clock, SystemClock
from finance_timeline.domain.services.serialization import (
    event_from_record,
    event_to_record,
)
from finance_timeline.infrastructure.logging.logger import get_app_logger


Subscriber = Callable[[], None]


class ChangeCommandGate:
    """One lock per change id, so command evaluation is serialized per change.

    A lock is dropped once no thread holds or waits for it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, list] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, change_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(change_id, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if not entry[1]:
                    del self._locks[change_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class EventLog:
    """Ordered, append-only sequence of domain events."""

    def __init__(
        self,
        store: EventStorePort | None = None,
        clock: Clock | None = None,
        logger=None,
    ) -> None:
        """Initialize an empty log.

        Args:
            store: Durable store persisting every append; None keeps the
                log in memory only.
            clock: Clock stamping new events.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._clock = clock or SystemClock()
        self._logger = logger or get_app_logger()
        self._events: list[Event] = []
        self._pending: list[Event] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()
        self._gate = ChangeCommandGate()

    def load(self) -> int:
        """Replace the in-memory sequence with the store content.

        Returns:
            int: Number of events loaded.
        """
        if self._store is None:
            return len(self._events)
        records = self._store.load()
        events = [event_from_record(record) for record in records]
        with self._lock:
            self._events = events
            self._pending = []
        self._logger.info(f"Loaded {len(events)} events from the event store")
        self._notify()
        return len(events)

    def append(self, events: Iterable[Event]) -> None:
        """Append a batch of events, persist it, then notify subscribers once.

        Raises:
            ValueError: If a timestamp is older than the last appended one.
            StoreFailure: If persisting fails. The events stay in memory and
                are retried by ``flush()``; subscribers are not notified.
        """
        batch = list(events)
        with self._lock:
            self._extend(batch)
        self._notify()

    def append_stamped(
        self, build: Callable[[int], Iterable[Event]]
    ) -> list[Event]:
        """Append the events ``build`` creates for a fresh timestamp.

        The timestamp is taken and the batch appended under the log lock, so
        an append from another change cannot slip in between and make the
        batch older than the log tail.

        Returns:
            list[Event]: The appended batch.
        """
        with self._lock:
            batch = list(build(self.next_timestamp()))
            self._extend(batch)
        self._notify()
        return batch

    def _extend(self, batch: list[Event]) -> None:
        last = self._events[-1].timestamp if self._events else None
        for event in batch:
            if last is not None and event.timestamp < last:
                raise ValueError(
                    f"Event timestamp {event.timestamp} is older than "
                    f"the last appended timestamp {last}"
                )
            last = event.timestamp
        self._events.extend(batch)
        self._pending.extend(batch)
        self._persist_pending()

    def flush(self) -> int:
        """Retry persisting events appended while the store was failing.

        Returns:
            int: Number of events persisted by this call.
        """
        with self._lock:
            count = len(self._pending)
            if not count:
                return 0
            self._persist_pending()
        self._logger.info(f"Persisted {count} pending events")
        self._notify()
        return count

    @property
    def pending_count(self) -> int:
        """Number of events appended in memory but not yet durable."""
        with self._lock:
            return len(self._pending)

    def list(self) -> list[Event]:
        """Return a copy of every event in append order."""
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def next_timestamp(self) -> int:
        """Return a timestamp not older than the last appended event."""
        with self._lock:
            now = self._clock.now_ms()
            if self._events:
                return max(now, self._events[-1].timestamp)
            return now

    def change_lock(self, change_id: str):
        """Context manager serializing commands targeting ``change_id``."""
        return self._gate.hold(change_id)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a listener called after every append or clear.

        Returns:
            Callable[[], None]: Function removing the listener.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def clear(self) -> None:
        """Empty the log (and its store) and notify subscribers."""
        with self._lock:
            if self._store is not None:
                self._store.clear()
            self._events = []
            self._pending = []
        self._logger.info("Event log cleared")
        self._notify()

    def close(self) -> None:
        """Drop every subscriber at the end of a session."""
        with self._lock:
            self._subscribers.clear()

    def _persist_pending(self) -> None:
        if self._store is None:
            self._pending.clear()
            return
        records = [event_to_record(event) for event in self._pending]
        try:
            self._store.append(records)
        except StoreFailure as exc:
            self._logger.error(
                f"Failed to persist {len(records)} events; "
                f"kept in memory for retry: {exc}"
            )
            raise
        self._pending.clear()

    def _notify(self) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        first_error: Exception | None = None
        for callback in subscribers:
            try:
                callback()
            except Exception as exc:
                self._logger.error(f"Event log subscriber failed: {exc}")
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error


__all__ = ["EventLog", "ChangeCommandGate", "Subscriber"]

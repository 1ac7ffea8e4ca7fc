"""In-memory store adapters used for tests and the memory backend.

Values are JSON round-tripped on the way in and out so callers never share
mutable state with the store, matching the SQL adapters.
"""

import json
import threading
from typing import Any

from finance_timeline.application.ports.event_store import EventStorePort
from finance_timeline.application.ports.view_store import ViewStorePort


def _copy(value: Any) -> Any:
    return json.loads(json.dumps(value))


class InMemoryEventStore(EventStorePort):
    """Event store keeping records in a list."""

    def __init__(self) -> None:
        self._records: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def append(self, records: list[dict[str, Any]]) -> None:
        copies = [_copy(record) for record in records]
        with self._lock:
            self._records.extend(copies)

    def load(self) -> list[dict[str, Any]]:
        with self._lock:
            return [_copy(record) for record in self._records]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class InMemoryViewStore(ViewStorePort):
    """View store keeping one dict per store name."""

    def __init__(self) -> None:
        self._stores: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def put(self, store: str, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._stores.setdefault(store, {})[key] = encoded

    def get(self, store: str, key: str) -> Any | None:
        with self._lock:
            encoded = self._stores.get(store, {}).get(key)
        return None if encoded is None else json.loads(encoded)

    def keys(self, store: str) -> list[str]:
        with self._lock:
            return sorted(self._stores.get(store, {}))

    def clear(self, store: str) -> None:
        with self._lock:
            self._stores.pop(store, None)


__all__ = ["InMemoryEventStore", "InMemoryViewStore"]

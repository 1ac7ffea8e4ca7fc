"""Port for the keyed blob store holding materialized views."""

from typing import Any, Protocol


class ViewStorePort(Protocol):
    """Port exposing get/put access to JSON-safe blobs grouped by store."""

    def put(self, store: str, key: str, value: Any) -> None:
        """Write ``value`` under ``key``, replacing any previous value."""

    def get(self, store: str, key: str) -> Any | None:
        """Return the value stored under ``key``, or None."""

    def keys(self, store: str) -> list[str]:
        """Return every key of ``store``."""

    def clear(self, store: str) -> None:
        """Remove every entry of ``store``."""


__all__ = ["ViewStorePort"]

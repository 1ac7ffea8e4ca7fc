"""Domain models for published and cancelled versions."""

from dataclasses import dataclass

from finance_timeline.domain.constants import VersionType


@dataclass(frozen=True)
class VersionInfo:
    """A published or cancelled change usable as a replay target.

    Attributes:
        id: Change id of the version.
        type: Whether the change was published or cancelled.
        timestamp: Timestamp of the publish/cancel event.
        description: Human readable label ("Published" or "Cancelled").
        position: Index of the publish/cancel event in the log.
    """

    id: str
    type: VersionType
    timestamp: int
    description: str
    position: int


__all__ = ["VersionInfo"]

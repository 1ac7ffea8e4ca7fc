"""Version history derived from publish and cancel events."""

from collections.abc import Iterable

from finance_timeline.domain.constants import (
    CANCELLED,
    PUBLISHED,
    VERSION_DESCRIPTIONS,
)
from finance_timeline.domain.models.events import (
    ChangeCancelled,
    ChangePublished,
    Event,
)
from finance_timeline.domain.models.versions import VersionInfo


def build_versions(events: Iterable[Event]) -> list[VersionInfo]:
    """Return one version per publish/cancel event, sorted by timestamp.

    Ties keep log order (the sort is stable on the log position).
    """
    versions: list[VersionInfo] = []
    for position, event in enumerate(events):
        if isinstance(event, ChangePublished):
            version_type = PUBLISHED
        elif isinstance(event, ChangeCancelled):
            version_type = CANCELLED
        else:
            continue
        versions.append(
            VersionInfo(
                id=event.change_id,
                type=version_type,
                timestamp=event.timestamp,
                description=VERSION_DESCRIPTIONS[version_type],
                position=position,
            )
        )
    return sorted(versions, key=lambda version: (version.timestamp, version.position))


class VersionIndex:
    """Ordered versions and their cumulative inclusion scopes.

    The inclusion scope of version ``i`` is every change id published in
    ``versions[0..i]`` plus the version's own change id. A cancelled
    version therefore never appears in a later version's scope.
    """

    def __init__(self, versions: list[VersionInfo]) -> None:
        self.versions = versions
        self._scopes: list[frozenset[str]] = []
        published: set[str] = set()
        for version in versions:
            if version.type == PUBLISHED:
                published.add(version.id)
            self._scopes.append(frozenset(published | {version.id}))

    @classmethod
    def from_events(cls, events: Iterable[Event]) -> "VersionIndex":
        return cls(build_versions(events))

    def __len__(self) -> int:
        return len(self.versions)

    def _index_of(self, version_id: str) -> int | None:
        for index, version in enumerate(self.versions):
            if version.id == version_id:
                return index
        return None

    def get(self, version_id: str) -> VersionInfo | None:
        index = self._index_of(version_id)
        return None if index is None else self.versions[index]

    def included_changes(self, version_id: str) -> frozenset[str] | None:
        """Return the inclusion scope of a version, or None when unknown."""
        index = self._index_of(version_id)
        return None if index is None else self._scopes[index]

    def cutoff(self, version_id: str) -> int | None:
        """Return the number of log events visible when replaying a version."""
        version = self.get(version_id)
        return None if version is None else version.position + 1

    def latest_published(self) -> VersionInfo | None:
        for version in reversed(self.versions):
            if version.type == PUBLISHED:
                return version
        return None

    def published_change_ids(self) -> frozenset[str]:
        return frozenset(v.id for v in self.versions if v.type == PUBLISHED)


__all__ = ["build_versions", "VersionIndex"]

"""Use case listing the published and cancelled versions."""

from dataclasses import dataclass

from finance_timeline.application.event_log import EventLog
from finance_timeline.domain.models.versions import VersionInfo
from finance_timeline.domain.services.versions import VersionIndex
from finance_timeline.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class VersionHistory:
    """Ordered versions and the default replay target.

    Attributes:
        versions: Versions sorted by timestamp, oldest first.
        latest_published_id: Most recent published version, if any.
    """

    versions: list[VersionInfo]
    latest_published_id: str | None


class ListVersionsUseCase:
    """Derive the version history from the event log."""

    def __init__(self, event_log: EventLog, logger=None) -> None:
        self._event_log = event_log
        self._logger = logger or get_app_logger()

    def execute(self) -> VersionHistory:
        index = VersionIndex.from_events(self._event_log.list())
        latest = index.latest_published()
        self._logger.debug(f"Found {len(index)} versions")
        return VersionHistory(
            versions=list(index.versions),
            latest_published_id=latest.id if latest else None,
        )


__all__ = ["ListVersionsUseCase", "VersionHistory"]

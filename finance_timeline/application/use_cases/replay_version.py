"""Use case replaying the finances as of a given version."""

from dataclasses import dataclass

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.view_materializer import project_version
from finance_timeline.domain.constants import DEFAULT_REQUEST_ID
from finance_timeline.domain.models.finance import MonthlyFinances, Projection
from finance_timeline.domain.models.versions import VersionInfo
from finance_timeline.domain.services.projection import filter_finances
from finance_timeline.domain.services.versions import VersionIndex
from finance_timeline.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class VersionReplay:
    """Finances visible at a version.

    Attributes:
        version: Version being replayed.
        included_changes: Changes published up to the version, plus itself.
        projection: Projection of the events up to the version event.
        contributed: Months and entries added by the version's own change.
    """

    version: VersionInfo
    included_changes: frozenset[str]
    projection: Projection
    contributed: MonthlyFinances


class ReplayVersionUseCase:
    """Fold the log as it stood when a version was published or cancelled."""

    def __init__(
        self,
        event_log: EventLog,
        request_id: str = DEFAULT_REQUEST_ID,
        logger=None,
    ) -> None:
        self._event_log = event_log
        self._request_id = request_id
        self._logger = logger or get_app_logger()

    def execute(self, version_id: str) -> VersionReplay | None:
        """Replay ``version_id``.

        Returns:
            VersionReplay | None: Replay result, or None if the id is not a
            version.
        """
        events = self._event_log.list()
        index = VersionIndex.from_events(events)
        version = index.get(version_id)
        if version is None:
            self._logger.warning(f"Unknown version: {version_id}")
            return None
        projection = project_version(
            events, index, version_id, self._request_id, self._logger
        )
        return VersionReplay(
            version=version,
            included_changes=index.included_changes(version_id),
            projection=projection,
            contributed=filter_finances(projection.finances, [version_id]),
        )


__all__ = ["ReplayVersionUseCase", "VersionReplay"]

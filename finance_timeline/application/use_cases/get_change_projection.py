"""Use case projecting the monthly finances seen by one change."""

from dataclasses import dataclass

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.use_cases.change_commands import (
    load_change_aggregate,
)
from finance_timeline.application.view_materializer import project_change
from finance_timeline.domain.constants import DEFAULT_REQUEST_ID
from finance_timeline.domain.models.finance import Projection
from finance_timeline.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ChangeProjectionView:
    """Projection of a change plus the commands its state allows.

    Attributes:
        projection: Request entries plus the entries of the change.
        can_add_item: Whether new entries may be staged.
        can_commit: Whether staged entries may be committed.
        can_publish: Whether the change may be published.
        can_cancel: Whether the change may be cancelled.
    """

    projection: Projection
    can_add_item: bool
    can_commit: bool
    can_publish: bool
    can_cancel: bool


class GetChangeProjectionUseCase:
    """Fold the log for the request and one active change."""

    def __init__(
        self,
        event_log: EventLog,
        request_id: str = DEFAULT_REQUEST_ID,
        logger=None,
    ) -> None:
        self._event_log = event_log
        self._request_id = request_id
        self._logger = logger or get_app_logger()

    def execute(self, change_id: str) -> ChangeProjectionView:
        """Return the projection and guards of ``change_id``."""
        events = self._event_log.list()
        aggregate = load_change_aggregate(self._event_log, change_id)
        projection = project_change(
            events, change_id, self._request_id, self._logger
        )
        self._logger.debug(
            f"Projected change {change_id}: {len(projection.finances)} months, "
            f"status={projection.change_status}"
        )
        return ChangeProjectionView(
            projection=projection,
            can_add_item=aggregate.can_add_item(),
            can_commit=aggregate.can_commit(),
            can_publish=aggregate.can_publish(),
            can_cancel=aggregate.can_cancel(),
        )


__all__ = ["GetChangeProjectionUseCase", "ChangeProjectionView"]

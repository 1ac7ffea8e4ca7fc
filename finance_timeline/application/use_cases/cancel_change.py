"""Use case cancelling a draft change."""

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.use_cases.change_commands import (
    ChangeCommandResult,
    load_change_aggregate,
    record_usage,
    reject,
    require_existing_change,
)
from finance_timeline.domain.constants import CANCELLED
from finance_timeline.domain.models.events import ChangeCancelled
from finance_timeline.infrastructure.logging.logger import get_app_logger


class CancelChangeUseCase:
    """Append ``ChangeCancelled``; the change's entries are voided in views."""

    def __init__(self, event_log: EventLog, logger=None) -> None:
        self._event_log = event_log
        self._logger = logger or get_app_logger()

    def execute(self, change_id: str) -> ChangeCommandResult:
        """Cancel ``change_id``.

        Raises:
            InvalidCommand: If the change does not exist.
            GuardViolation: If the change is not a draft with committed
                entries.
        """
        with self._event_log.change_lock(change_id):
            aggregate = load_change_aggregate(self._event_log, change_id)
            require_existing_change(aggregate, "cancel", self._logger)
            if not aggregate.can_cancel():
                raise reject(
                    aggregate,
                    "cancel",
                    "change is not in draft or has no committed events",
                    self._logger,
                )
            self._event_log.append_stamped(
                lambda timestamp: [
                    ChangeCancelled(change_id=change_id, timestamp=timestamp)
                ]
            )

        self._logger.info(f"Cancelled change {change_id}")
        record_usage("cancel", change_id, "accepted")
        return ChangeCommandResult(
            change_id=change_id,
            status=CANCELLED,
            appended_count=1,
        )


__all__ = ["CancelChangeUseCase"]

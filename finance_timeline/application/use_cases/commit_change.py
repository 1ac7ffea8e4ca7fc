"""Use case committing staged incomes and expenses to a draft change."""

from collections.abc import Sequence

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.use_cases.change_commands import (
    ChangeCommandResult,
    load_change_aggregate,
    record_usage,
    reject,
    require_existing_change,
)
from finance_timeline.domain.exceptions import InvalidCommand
from finance_timeline.domain.models.commands import EntryDraft
from finance_timeline.infrastructure.logging.logger import get_app_logger


class CommitChangeUseCase:
    """Append a batch of entry events to a change still in draft.

    The batch is validated as a whole before anything is appended, and is
    appended with a single ``EventLog.append_stamped`` call.
    """

    def __init__(self, event_log: EventLog, logger=None) -> None:
        self._event_log = event_log
        self._logger = logger or get_app_logger()

    def execute(
        self,
        change_id: str,
        drafts: Sequence[EntryDraft],
    ) -> ChangeCommandResult:
        """Commit ``drafts`` to ``change_id``.

        Raises:
            InvalidCommand: If the batch is empty, a draft is invalid or
                the change does not exist.
            GuardViolation: If the change is no longer a draft.
        """
        if not drafts:
            raise InvalidCommand("Nothing to commit: no pending entries")
        validated = [draft.validate() for draft in drafts]

        with self._event_log.change_lock(change_id):
            aggregate = load_change_aggregate(self._event_log, change_id)
            require_existing_change(aggregate, "commit", self._logger)
            if not (aggregate.can_commit() and aggregate.can_add_item()):
                raise reject(
                    aggregate,
                    "commit",
                    "change must be in draft",
                    self._logger,
                )
            events = self._event_log.append_stamped(
                lambda timestamp: [
                    draft.to_event(change_id, timestamp) for draft in validated
                ]
            )

        self._logger.info(f"Committed {len(events)} entries to change {change_id}")
        record_usage("commit", change_id, "accepted")
        return ChangeCommandResult(
            change_id=change_id,
            status=aggregate.status,
            appended_count=len(events),
        )


__all__ = ["CommitChangeUseCase"]

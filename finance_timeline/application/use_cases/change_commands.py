"""Helpers shared by the change command use cases."""

from dataclasses import dataclass

from finance_timeline.application.event_log import EventLog
from finance_timeline.domain.aggregates.change import ChangeAggregate
from finance_timeline.domain.constants import ChangeStatus
from finance_timeline.domain.exceptions import GuardViolation, InvalidCommand
from finance_timeline.infrastructure.logging.logger import get_usage_logger


@dataclass(frozen=True)
class ChangeCommandResult:
    """Outcome of an accepted change command.

    Attributes:
        change_id: Change the command targeted.
        status: Aggregate status after the command.
        appended_count: Number of events appended.
    """

    change_id: str
    status: ChangeStatus
    appended_count: int


def load_change_aggregate(event_log: EventLog, change_id: str) -> ChangeAggregate:
    """Fold the whole log into the aggregate of ``change_id``."""
    return ChangeAggregate.from_events(change_id, event_log.list())


def record_usage(command: str, change_id: str, outcome: str) -> None:
    """Write one line per command outcome to the usage log."""
    get_usage_logger().info(f"{command} change={change_id} outcome={outcome}")


def require_existing_change(
    aggregate: ChangeAggregate,
    command: str,
    logger,
) -> None:
    """Reject commands targeting a change that was never created."""
    if not aggregate.exists:
        logger.warning(f"Rejected {command}: unknown change {aggregate.change_id}")
        record_usage(command, aggregate.change_id, "unknown")
        raise InvalidCommand(f"Unknown change id: {aggregate.change_id}")


def reject(
    aggregate: ChangeAggregate,
    command: str,
    reason: str,
    logger,
) -> GuardViolation:
    """Log and build the guard violation for a refused command."""
    logger.warning(
        f"Rejected {command} for change {aggregate.change_id} "
        f"(status={aggregate.status}, "
        f"committed={aggregate.committed_event_count}): {reason}"
    )
    record_usage(command, aggregate.change_id, "rejected")
    return GuardViolation(
        change_id=aggregate.change_id,
        command=command,
        status=aggregate.status,
        reason=reason,
    )


__all__ = [
    "ChangeCommandResult",
    "load_change_aggregate",
    "require_existing_change",
    "reject",
    "record_usage",
]

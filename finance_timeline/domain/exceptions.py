"""Typed errors raised by the change timeline."""


class FinanceTimelineError(Exception):
    """Base class for every error raised by finance_timeline."""


class CommandRejected(FinanceTimelineError):
    """A command was refused before any event was appended."""


class GuardViolation(CommandRejected):
    """A command was issued while the change aggregate forbids it.

    Attributes:
        change_id: Change the command targeted.
        command: Command name (commit, publish, cancel, ...).
        status: Aggregate status when the command was evaluated.
    """

    def __init__(self, change_id: str, command: str, status: str, reason: str):
        self.change_id = change_id
        self.command = command
        self.status = status
        super().__init__(
            f"Cannot {command} change {change_id} (status={status}): {reason}"
        )


class InvalidCommand(CommandRejected):
    """A command payload failed validation."""


class MalformedPeriod(FinanceTimelineError):
    """An income/expense period is unparsable or inverted."""


class UnknownEventType(FinanceTimelineError):
    """An event record names a type outside the event union."""

    def __init__(self, event_type):
        self.event_type = event_type
        super().__init__(f"Unknown event type: {event_type!r}")


class MalformedEventRecord(FinanceTimelineError):
    """An event record is missing fields required by its type."""


class StoreFailure(FinanceTimelineError):
    """The external persistence collaborator failed or timed out.

    Callers should retry the persistence step rather than re-derive events.
    """


__all__ = [
    "FinanceTimelineError",
    "CommandRejected",
    "GuardViolation",
    "InvalidCommand",
    "MalformedPeriod",
    "UnknownEventType",
    "MalformedEventRecord",
    "StoreFailure",
]

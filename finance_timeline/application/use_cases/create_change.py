"""Use case opening a new draft change."""

from collections.abc import Callable
from uuid import uuid4

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.use_cases.change_commands import record_usage
from finance_timeline.domain.models.events import ChangeCreated
from finance_timeline.infrastructure.logging.logger import get_app_logger


MAX_ID_ATTEMPTS = 10


def generate_change_id() -> str:
    """Return a short hexadecimal change id such as ``0x1a2b3c4d``."""
    return f"0x{uuid4().hex[:8]}"


class CreateChangeUseCase:
    """Append ``ChangeCreated`` with a change id not used in the log yet."""

    def __init__(
        self,
        event_log: EventLog,
        id_factory: Callable[[], str] | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            event_log: Log receiving the new event.
            id_factory: Callable producing candidate change ids.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._event_log = event_log
        self._id_factory = id_factory or generate_change_id
        self._logger = logger or get_app_logger()

    def execute(self) -> str:
        """Create a change and return its id.

        Raises:
            RuntimeError: If no unused id could be generated.
        """
        for _ in range(MAX_ID_ATTEMPTS):
            change_id = self._id_factory()
            with self._event_log.change_lock(change_id):
                if self._is_known(change_id):
                    continue
                self._event_log.append_stamped(
                    lambda timestamp: [
                        ChangeCreated(change_id=change_id, timestamp=timestamp)
                    ]
                )
            self._logger.info(f"Created change {change_id}")
            record_usage("create", change_id, "accepted")
            return change_id
        raise RuntimeError(
            f"Could not generate an unused change id after {MAX_ID_ATTEMPTS} attempts"
        )

    def _is_known(self, change_id: str) -> bool:
        return any(
            isinstance(event, ChangeCreated) and event.change_id == change_id
            for event in self._event_log.list()
        )


__all__ = ["CreateChangeUseCase", "generate_change_id"]

"""Use case registering the request that changes are attached to."""

from finance_timeline.application.event_log import EventLog
from finance_timeline.domain.constants import DEFAULT_REQUEST_ID
from finance_timeline.domain.models.events import RequestCreated
from finance_timeline.infrastructure.logging.logger import get_app_logger


class CreateRequestUseCase:
    """Append ``RequestCreated`` unless the request already exists."""

    def __init__(
        self,
        event_log: EventLog,
        request_id: str = DEFAULT_REQUEST_ID,
        logger=None,
    ) -> None:
        self._event_log = event_log
        self._request_id = request_id
        self._logger = logger or get_app_logger()

    def execute(self) -> bool:
        """Create the request.

        Returns:
            bool: True when the event was appended, False if it existed.
        """
        with self._event_log.change_lock(self._request_id):
            exists = any(
                isinstance(event, RequestCreated)
                and event.request_id == self._request_id
                for event in self._event_log.list()
            )
            if exists:
                return False
            self._event_log.append_stamped(
                lambda timestamp: [
                    RequestCreated(request_id=self._request_id, timestamp=timestamp)
                ]
            )
        self._logger.info(f"Created request {self._request_id}")
        return True


__all__ = ["CreateRequestUseCase"]

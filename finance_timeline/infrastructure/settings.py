"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

from finance_timeline.domain.constants import DEFAULT_REQUEST_ID
from finance_timeline.infrastructure.logging.logger import get_app_logger


MEMORY_BACKEND = "memory"
SQLALCHEMY_BACKEND = "sqlalchemy"
SUPPORTED_BACKENDS = (MEMORY_BACKEND, SQLALCHEMY_BACKEND)
DEFAULT_STORE_TIMEOUT_SECONDS = 5.0

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TimelineSettings:
    """Settings for the event and view stores.

    Attributes:
        backend: Store backend identifier (memory or sqlalchemy).
        request_id: Request every change is attached to.
        store_timeout_seconds: Upper bound on waits for a store connection.
        view_cache: Whether materialized views are kept in the view store.
    """

    backend: str = MEMORY_BACKEND
    request_id: str = DEFAULT_REQUEST_ID
    store_timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS
    view_cache: bool = True

    @classmethod
    def from_env(cls) -> "TimelineSettings":
        """Build settings from environment variables.

        Returns:
            TimelineSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        backend = os.getenv("TIMELINE_BACKEND", MEMORY_BACKEND).strip().lower()
        request_id = (
            os.getenv("TIMELINE_REQUEST_ID", DEFAULT_REQUEST_ID).strip()
            or DEFAULT_REQUEST_ID
        )
        timeout = cls._parse_timeout(
            os.getenv("STORE_TIMEOUT_SECONDS"),
            logger=logger,
        )
        raw_cache = os.getenv("TIMELINE_VIEW_CACHE", "true").strip().lower()
        return cls(
            backend=backend,
            request_id=request_id,
            store_timeout_seconds=timeout,
            view_cache=raw_cache not in _FALSE_VALUES,
        )

    @staticmethod
    def _parse_timeout(raw_value: str | None, logger) -> float:
        """Parse the store timeout, falling back to the default.

        Args:
            raw_value: Raw environment value.
            logger: Logger used for warnings.

        Returns:
            float: Positive timeout in seconds.
        """
        if not raw_value:
            return DEFAULT_STORE_TIMEOUT_SECONDS
        try:
            timeout = float(raw_value)
        except ValueError:
            logger.warning(
                f"Invalid STORE_TIMEOUT_SECONDS={raw_value!r}; "
                f"using {DEFAULT_STORE_TIMEOUT_SECONDS}"
            )
            return DEFAULT_STORE_TIMEOUT_SECONDS
        if timeout <= 0:
            logger.warning(
                f"STORE_TIMEOUT_SECONDS must be positive, got {timeout}; "
                f"using {DEFAULT_STORE_TIMEOUT_SECONDS}"
            )
            return DEFAULT_STORE_TIMEOUT_SECONDS
        return timeout


__all__ = [
    "TimelineSettings",
    "MEMORY_BACKEND",
    "SQLALCHEMY_BACKEND",
    "SUPPORTED_BACKENDS",
]

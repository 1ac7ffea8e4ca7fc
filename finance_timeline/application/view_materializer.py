"""Materialized monthly views cached in the keyed view store.

Views are never patched: every log notification recomputes each view from
the full log and overwrites the stored blob.
"""

import threading
from collections.abc import Callable

from finance_timeline.application.event_log import EventLog
from finance_timeline.application.ports.view_store import ViewStorePort
from finance_timeline.domain.constants import (
    CUMULATIVE_FINANCES_STORE,
    DEFAULT_REQUEST_ID,
    INCOMES_EXPENSES_STORE,
)
from finance_timeline.domain.models.events import ChangeCreated, Event
from finance_timeline.domain.models.finance import (
    MonthlyFinances,
    Projection,
    ProjectionScope,
)
from finance_timeline.domain.services.projection import reduce_events
from finance_timeline.domain.services.serialization import (
    finances_from_record,
    finances_to_record,
)
from finance_timeline.domain.services.versions import VersionIndex
from finance_timeline.infrastructure.logging.logger import get_app_logger


def project_change(
    events: list[Event],
    change_id: str,
    request_id: str,
    logger=None,
) -> Projection:
    """Project the request entries plus the entries of one change."""
    return reduce_events(
        events,
        ProjectionScope(request_id=request_id, active_change_id=change_id),
        logger=logger,
    )


def project_version(
    events: list[Event],
    index: VersionIndex,
    version_id: str,
    request_id: str,
    logger=None,
) -> Projection | None:
    """Replay the log as of ``version_id``, or None for unknown versions.

    Only events up to and including the version's publish/cancel event are
    folded, with the version's cumulative inclusion scope.
    """
    included = index.included_changes(version_id)
    cutoff = index.cutoff(version_id)
    if included is None or cutoff is None:
        return None
    return reduce_events(
        events[:cutoff],
        ProjectionScope(
            request_id=request_id,
            active_change_id=version_id,
            included_changes=included,
        ),
        logger=logger,
    )


class ViewMaterializer:
    """Keep the incomes/expenses and cumulative views in sync with the log."""

    def __init__(
        self,
        event_log: EventLog,
        view_store: ViewStorePort,
        request_id: str = DEFAULT_REQUEST_ID,
        logger=None,
    ) -> None:
        """Initialize the materializer.

        Args:
            event_log: Log the views are derived from.
            view_store: Keyed blob store receiving the views.
            request_id: Request whose entries every view includes.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._event_log = event_log
        self._view_store = view_store
        self._request_id = request_id
        self._logger = logger or get_app_logger()
        self._unsubscribe: Callable[[], None] | None = None
        self._refresh_lock = threading.RLock()

    def attach(self) -> None:
        """Subscribe to the log and recompute views on every notification."""
        if self._unsubscribe is None:
            self._unsubscribe = self._event_log.subscribe(self.refresh)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def reset(self) -> None:
        """Remove every stored view."""
        self._view_store.clear(INCOMES_EXPENSES_STORE)
        self._view_store.clear(CUMULATIVE_FINANCES_STORE)

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def refresh(self) -> int:
        """Recompute and overwrite every change and version view.

        Refreshes are serialized and each one reads the log after taking the
        lock, so the last refresh to finish always reflects the latest log.

        Returns:
            int: Number of views written.
        """
        with self._refresh_lock:
            events = self._event_log.list()
            index = VersionIndex.from_events(events)
            self.reset()
            written = 0
            change_ids = [
                e.change_id for e in events if isinstance(e, ChangeCreated)
            ]
            for change_id in dict.fromkeys(change_ids):
                projection = project_change(
                    events, change_id, self._request_id, self._logger
                )
                self._store(INCOMES_EXPENSES_STORE, change_id, projection.finances)
                written += 1
            for version in index.versions:
                projection = project_version(
                    events, index, version.id, self._request_id, self._logger
                )
                self._store(
                    CUMULATIVE_FINANCES_STORE, version.id, projection.finances
                )
                written += 1
        self._logger.info(f"Materialized {written} views from {len(events)} events")
        return written

    def change_finances(self, change_id: str) -> MonthlyFinances:
        """Return the view of a change.

        While detached the view is computed from the log and never cached,
        since nothing would invalidate it on the next append.
        """
        if not self.attached:
            return project_change(
                self._event_log.list(), change_id, self._request_id, self._logger
            ).finances
        with self._refresh_lock:
            cached = self._view_store.get(INCOMES_EXPENSES_STORE, change_id)
            if cached is not None:
                return finances_from_record(cached)
            projection = project_change(
                self._event_log.list(), change_id, self._request_id, self._logger
            )
            self._store(INCOMES_EXPENSES_STORE, change_id, projection.finances)
            return projection.finances

    def version_finances(self, version_id: str) -> MonthlyFinances | None:
        """Return the view of a version, or None for unknown versions."""
        if not self.attached:
            return self._project_version(self._event_log.list(), version_id)
        with self._refresh_lock:
            cached = self._view_store.get(CUMULATIVE_FINANCES_STORE, version_id)
            if cached is not None:
                return finances_from_record(cached)
            finances = self._project_version(self._event_log.list(), version_id)
            if finances is not None:
                self._store(CUMULATIVE_FINANCES_STORE, version_id, finances)
            return finances

    def _project_version(
        self, events: list[Event], version_id: str
    ) -> MonthlyFinances | None:
        projection = project_version(
            events,
            VersionIndex.from_events(events),
            version_id,
            self._request_id,
            self._logger,
        )
        return None if projection is None else projection.finances

    def _store(self, store: str, key: str, finances: MonthlyFinances) -> None:
        self._view_store.put(store, key, finances_to_record(finances))


__all__ = ["ViewMaterializer", "project_change", "project_version"]

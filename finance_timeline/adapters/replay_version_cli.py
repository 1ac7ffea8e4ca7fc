"""CLI adapter printing the monthly finances as of a version.

The version is read from ``REPLAY_VERSION_ID`` and defaults to the latest
published version.
"""

import os

from finance_timeline.application.use_cases.list_versions import (
    ListVersionsUseCase,
)
from finance_timeline.application.use_cases.replay_version import (
    ReplayVersionUseCase,
    VersionReplay,
)
from finance_timeline.domain.services.calendar import format_month_display
from finance_timeline.infrastructure.container import build_event_log
from finance_timeline.infrastructure.logging.logger import get_app_logger
from finance_timeline.infrastructure.settings import TimelineSettings


def _print_replay(replay: VersionReplay) -> None:
    finances = replay.projection.finances
    print(
        f"Version {replay.version.id} ({replay.version.description}), "
        f"changes: {', '.join(sorted(replay.included_changes))}"
    )
    if not finances:
        print("No entries.")
        return
    print(f"{'Month':<16}{'Incomes':>12}{'Expenses':>12}{'Net':>12}")
    for key in sorted(finances):
        bucket = finances[key]
        incomes = sum(entry.amount for entry in bucket.incomes)
        expenses = sum(entry.amount for entry in bucket.expenses)
        print(
            f"{format_month_display(key):<16}"
            f"{incomes:>12}{expenses:>12}{bucket.net:>12}"
        )
    touched = [format_month_display(key) for key in sorted(replay.contributed)]
    print(
        f"Months changed by {replay.version.id}: "
        f"{', '.join(touched) or 'none'}"
    )


def main() -> None:
    """Replay the configured version and print its monthly table."""
    logger = get_app_logger()
    settings = TimelineSettings.from_env()
    event_log = build_event_log(settings)
    try:
        version_id = os.getenv("REPLAY_VERSION_ID")
        if not version_id:
            history = ListVersionsUseCase(event_log, logger=logger).execute()
            version_id = history.latest_published_id
        if not version_id:
            logger.warning("No published version to replay.")
            return
        replay = ReplayVersionUseCase(
            event_log,
            request_id=settings.request_id,
            logger=logger,
        ).execute(version_id)
    finally:
        event_log.close()

    if replay is None:
        print(f"Unknown version: {version_id}")
        return
    _print_replay(replay)


if __name__ == "__main__":  # pragma: no cover
    main()

"""CLI adapter printing the published and cancelled versions."""

from datetime import datetime, timezone

from finance_timeline.application.use_cases.list_versions import (
    ListVersionsUseCase,
)
from finance_timeline.infrastructure.container import build_event_log
from finance_timeline.infrastructure.logging.logger import get_app_logger
from finance_timeline.infrastructure.settings import TimelineSettings


def _format_timestamp(timestamp: int) -> str:
    moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def main() -> None:
    """Print every version, oldest first."""
    logger = get_app_logger()
    settings = TimelineSettings.from_env()
    event_log = build_event_log(settings)
    try:
        history = ListVersionsUseCase(event_log, logger=logger).execute()
    finally:
        event_log.close()

    if not history.versions:
        print("No versions yet: publish or cancel a change first.")
        return
    print(f"{len(history.versions)} versions:")
    for version in history.versions:
        marker = "*" if version.id == history.latest_published_id else " "
        print(
            f"{marker} {version.id}  {version.description:<9}  "
            f"{_format_timestamp(version.timestamp)}"
        )


if __name__ == "__main__":  # pragma: no cover
    main()

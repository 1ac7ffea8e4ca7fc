"""Injectable clocks producing millisecond timestamps."""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of event timestamps in milliseconds since the epoch."""

    def now_ms(self) -> int:
        """Return the current time in milliseconds."""


class SystemClock:
    """Wall-clock time in UTC."""

    def now_ms(self) -> int:
        return int(datetime.now(timezone.utc).timestamp() * 1000)


class FixedClock:
    """Clock returning a settable constant, for deterministic tests."""

    def __init__(self, now_ms: int = 0) -> None:
        self.value = now_ms

    def now_ms(self) -> int:
        return self.value

    def advance(self, delta_ms: int) -> None:
        self.value += delta_ms


__all__ = ["Clock", "SystemClock", "FixedClock"]

"""Domain services package."""

from .calendar import (
    expand_period,
    format_month_display,
    month_key,
    months_in_period,
    parse_month,
    parse_period_bound,
    period_from_months,
)
from .clock import Clock, FixedClock, SystemClock
from .projection import filter_finances, reduce_events
from .serialization import (
    event_from_record,
    event_to_record,
    finances_from_record,
    finances_to_record,
)
from .versions import VersionIndex, build_versions

__all__ = [
    "expand_period",
    "format_month_display",
    "month_key",
    "months_in_period",
    "parse_month",
    "parse_period_bound",
    "period_from_months",
    "Clock",
    "FixedClock",
    "SystemClock",
    "filter_finances",
    "reduce_events",
    "event_from_record",
    "event_to_record",
    "finances_from_record",
    "finances_to_record",
    "VersionIndex",
    "build_versions",
]

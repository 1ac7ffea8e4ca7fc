"""Calendar-month helpers for bucketing periods."""

import calendar
from datetime import date, datetime, timezone
import re

from finance_timeline.domain.exceptions import MalformedPeriod
from finance_timeline.domain.models.events import Period


_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(text: str) -> date:
    """Parse a ``YYYY-MM`` month into its first day.

    Args:
        text: Month text such as ``2025-01``.

    Returns:
        date: First day of the month.

    Raises:
        MalformedPeriod: If the text is not a valid month.
    """
    match = _MONTH_RE.match(text.strip()) if isinstance(text, str) else None
    if not match:
        raise MalformedPeriod(f"Invalid month '{text}'. Expected YYYY-MM.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise MalformedPeriod(f"Invalid month '{text}'. Expected YYYY-MM.")
    return date(year, month, 1)


def parse_period_bound(value) -> date | None:
    """Read a period bound into a date, or None when it is unreadable.

    Aware datetimes are normalised to UTC before the date is taken, so
    month buckets do not depend on the local timezone.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _MONTH_RE.match(text):
        try:
            return parse_month(text)
        except MalformedPeriod:
            return None
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parse_period_bound(parsed)


def month_anchor(day: date) -> date:
    return date(day.year, day.month, 1)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def months_in_period(start: date, end: date) -> list[date]:
    """Return the first day of every month touched by ``[start, end]``.

    The last month is included when ``end`` falls on or after its first day.
    """
    months: list[date] = []
    current = month_anchor(start)
    last = month_anchor(end)
    while current <= last:
        months.append(current)
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return months


def expand_period(period: Period) -> list[date]:
    """Expand a period into its month anchors.

    Raises:
        MalformedPeriod: If a bound is unreadable or ``end < start``.
    """
    start = parse_period_bound(period.start)
    end = parse_period_bound(period.end)
    if start is None or end is None:
        raise MalformedPeriod(
            f"Unreadable period bounds: start={period.start!r}, end={period.end!r}"
        )
    if end < start:
        raise MalformedPeriod(f"Period ends before it starts: {start} > {end}")
    return months_in_period(start, end)


def period_from_months(start_month: str, end_month: str) -> Period:
    """Build a period from two ``YYYY-MM`` months, anchored on day one."""
    start = parse_month(start_month)
    end = parse_month(end_month)
    if end < start:
        raise MalformedPeriod(
            f"End month {end_month} is before start month {start_month}"
        )
    return Period(start=start, end=end)


def format_month_display(key: str) -> str:
    """Return a label such as ``January 2025`` for a ``YYYY-MM`` key."""
    anchor = parse_month(key)
    return f"{calendar.month_name[anchor.month]} {anchor.year}"


__all__ = [
    "parse_month",
    "parse_period_bound",
    "month_anchor",
    "month_key",
    "months_in_period",
    "expand_period",
    "period_from_months",
    "format_month_display",
]

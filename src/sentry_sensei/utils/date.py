"""Utility functions for date operations."""

import logging
from datetime import datetime, time, timedelta, timezone

import dateutil.parser

logger = logging.getLogger("sentry-sensei.utils")

SENTRY_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_sentry_date(value: datetime) -> str:
    """Render a datetime the way the Sentry issues endpoint expects it.

    Timezone-aware values are converted to UTC first. Milliseconds and the
    trailing ``Z`` are dropped.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(SENTRY_DATE_FORMAT)


def strip_utc_suffix(date_str: str) -> str:
    """Remove a trailing ``Z`` from an ISO timestamp."""
    return date_str[:-1] if date_str.endswith("Z") else date_str


def previous_week_range(now: datetime | None = None) -> tuple[str, str]:
    """
    Compute the previous full calendar week in UTC.

    The week ends on the most recent Sunday (today when today is Sunday)
    at 23:59:59 and starts on the Monday six days before at 00:00:00.

    Args:
        now: Reference instant, the current time by default

    Returns:
        (start, end) formatted as ``YYYY-MM-DDTHH:MM:SS``
    """
    now = (now or utcnow()).astimezone(timezone.utc)
    days_since_sunday = (now.weekday() + 1) % 7
    last_sunday = (now - timedelta(days=days_since_sunday)).date()
    last_monday = last_sunday - timedelta(days=6)

    start = datetime.combine(last_monday, time(0, 0, 0), tzinfo=timezone.utc)
    end = datetime.combine(last_sunday, time(23, 59, 59), tzinfo=timezone.utc)
    return format_sentry_date(start), format_sentry_date(end)


def relative_date_range(
    relative_days: int, now: datetime | None = None
) -> tuple[str, str]:
    """
    Resolve "the last N days" into an absolute range.

    The start is midnight N days ago and the end is the last second of today.

    Args:
        relative_days: Number of days to look back
        now: Reference instant, the current time by default

    Returns:
        (date_from, date_to) formatted as ``YYYY-MM-DDTHH:MM:SS``
    """
    now = (now or utcnow()).astimezone(timezone.utc)
    start_day = (now - timedelta(days=relative_days)).date()

    date_from = datetime.combine(start_day, time(0, 0, 0), tzinfo=timezone.utc)
    date_to = datetime.combine(now.date(), time(23, 59, 59), tzinfo=timezone.utc)
    return format_sentry_date(date_from), format_sentry_date(date_to)


def parse_date(date_str: str | None, format_string: str = "%Y-%m-%d") -> str:
    """
    Parse a date string and reformat it.

    Accepts epoch milliseconds or anything `dateutil.parser` understands.
    Returns an empty string for empty input and the original string if
    it cannot be parsed.
    """
    if not date_str:
        return ""

    try:
        if date_str.isdigit():
            date = datetime.fromtimestamp(int(date_str) / 1000, tz=timezone.utc)
        else:
            date = dateutil.parser.parse(date_str)
        return date.strftime(format_string)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Could not parse date '{date_str}': {e}")

    return date_str


def parse_date_ymd(date_str: str | None) -> str:
    return parse_date(date_str, "%Y-%m-%d")


def parse_time_hms(date_str: str | None) -> str:
    return parse_date(date_str, "%H:%M:%S")

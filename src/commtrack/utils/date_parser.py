"""Date and timestamp parsing utilities."""

import calendar
from datetime import date, datetime, time, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a message timestamp such as an RFC 2822 ``Date`` header.

    Returns:
        Aware UTC datetime, or None if the value is missing or unparseable
    """
    if not value or not value.strip():
        return None
    try:
        return ensure_utc(date_parser.parse(value.strip()))
    except (ValueError, OverflowError, TypeError):
        return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative forms: "today", "yesterday", "this month", "last month",
    "this week", "last week", "this year", "last year". Weeks start on
    Sunday, matching the dashboard's "this week" figures.

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or utc_now().date()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this week": start_of_week(today),
        "last week": start_of_week(today) - timedelta(days=7),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=UTC)


def start_of_week(day: date) -> date:
    """Return the Sunday starting the week that contains day."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment.date().replace(day=1))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def get_date_range(
    preset: str,
    now: Optional[datetime] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Resolve a date range preset into inclusive bounds.

    Args:
        preset: One of this_month, last_30_days, last_90_days, ytd, all_time, custom
        now: Reference time; defaults to the current UTC time
        start: Optional lower bound, only used for custom ranges
        end: Optional upper bound, only used for custom ranges

    Returns:
        Tuple of (start, end); either bound may be None for an open range

    Raises:
        ValueError: If preset is not recognized
    """
    now = ensure_utc(now) if now is not None else utc_now()

    if preset == "this_month":
        return start_of_month(now), now

    elif preset == "last_30_days":
        return now - timedelta(days=30), now

    elif preset == "last_90_days":
        return now - timedelta(days=90), now

    elif preset == "ytd":
        return start_of_day(now.date().replace(month=1, day=1)), now

    elif preset == "all_time":
        return None, None

    elif preset == "custom":
        return (
            ensure_utc(start) if start is not None else None,
            ensure_utc(end) if end is not None else None,
        )

    raise ValueError(
        f"Unknown period: '{preset}'. Supported periods: this_month, last_30_days, "
        "last_90_days, ytd, all_time, custom"
    )

"""Tests for date parser with relative dates and range presets."""

import pytest
from datetime import date, datetime, timedelta, timezone, UTC

from commtrack.utils.date_parser import (
    end_of_day,
    ensure_utc,
    get_date_range,
    parse_date,
    parse_timestamp,
    start_of_week,
)

from conftest import NOW

TODAY = date(2024, 3, 15)  # a Friday


def test_parse_absolute_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("today", date(2024, 3, 15)),
        ("yesterday", date(2024, 3, 14)),
        ("this month", date(2024, 3, 1)),
        ("last month", date(2024, 2, 1)),
        ("this week", date(2024, 3, 10)),
        ("last week", date(2024, 3, 3)),
        ("this year", date(2024, 1, 1)),
        ("Last Year", date(2023, 1, 1)),
    ],
)
def test_parse_relative_dates(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("nonsense")


def test_week_starts_on_sunday():
    assert start_of_week(date(2024, 3, 10)) == date(2024, 3, 10)
    assert start_of_week(date(2024, 3, 16)) == date(2024, 3, 10)
    assert start_of_week(date(2024, 3, 10)).weekday() == 6


def test_parse_timestamp_rfc2822():
    result = parse_timestamp("Tue, 05 Mar 2024 09:30:00 -0800")
    assert result == datetime(2024, 3, 5, 17, 30, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", "   ", "garbage-value"])
def test_parse_timestamp_missing_or_invalid(value):
    assert parse_timestamp(value) is None


def test_ensure_utc():
    naive = datetime(2024, 3, 1, 12, 0)
    assert ensure_utc(naive) == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    plus_two = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(plus_two).hour == 10


def test_end_of_day_is_inclusive():
    assert end_of_day(TODAY) > datetime(2024, 3, 15, 23, 59, 59, tzinfo=UTC)


def test_get_date_range_presets():
    assert get_date_range("this_month", NOW) == (datetime(2024, 3, 1, tzinfo=UTC), NOW)
    assert get_date_range("last_30_days", NOW) == (NOW - timedelta(days=30), NOW)
    assert get_date_range("last_90_days", NOW) == (NOW - timedelta(days=90), NOW)
    assert get_date_range("ytd", NOW) == (datetime(2024, 1, 1, tzinfo=UTC), NOW)
    assert get_date_range("all_time", NOW) == (None, None)


def test_get_date_range_custom():
    start = datetime(2024, 2, 1)
    assert get_date_range("custom", NOW, start=start) == (start.replace(tzinfo=UTC), None)


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("last_decade", NOW)

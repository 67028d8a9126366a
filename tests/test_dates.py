import datetime as dt

import pytest

from weather_cli.dates import days_from_today, format_date, parse_date
from weather_cli.errors import DateParseError


def test_now_means_current_weather():
    assert parse_date("now") is None
    assert parse_date(" NOW ") is None


def test_relative_dates(fixed_today):
    assert parse_date("today") == fixed_today
    assert parse_date("tomorrow") == dt.date(2024, 5, 11)


def test_iso_date():
    assert parse_date("2024-02-29") == dt.date(2024, 2, 29)


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("2024-02", "number of date components"),
        ("2024-02-01-03", "number of date components"),
        ("abcd-01-01", "year"),
        ("2024-xx-01", "month"),
        ("2024-01-yy", "day"),
        ("2023-02-29", "Invalid date"),
    ],
)
def test_parse_errors(text, fragment):
    with pytest.raises(DateParseError) as exc:
        parse_date(text)
    assert fragment in str(exc.value)


def test_format_and_offset(fixed_today):
    assert format_date(dt.date(2024, 1, 5)) == "2024-01-05"
    assert days_from_today(dt.date(2024, 5, 12)) == 2
    assert days_from_today(dt.date(2024, 5, 3)) == -7

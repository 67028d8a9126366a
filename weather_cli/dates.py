from datetime import date, timedelta
from typing import Optional

from weather_cli.errors import DateParseError

NOW = "now"


def today() -> date:
    return date.today()


def parse_date(text: str) -> Optional[date]:
    """Разобрать дату прогноза.

    "now" означает текущую погоду (None), "today"/"tomorrow" - локальные даты,
    иначе ожидается формат YYYY-MM-DD.
    """
    value = text.strip().lower()
    if value == NOW:
        return None
    if value == "today":
        return today()
    if value == "tomorrow":
        return today() + timedelta(days=1)

    parts = value.split("-")
    if len(parts) != 3:
        raise DateParseError(f"Invalid number of date components in '{text}', expected YYYY-MM-DD")

    year, month, day = parts
    try:
        year_num = int(year)
    except ValueError:
        raise DateParseError(f"Error parsing date's year component '{year}'") from None
    try:
        month_num = int(month)
    except ValueError:
        raise DateParseError(f"Error parsing date's month component '{month}'") from None
    try:
        day_num = int(day)
    except ValueError:
        raise DateParseError(f"Error parsing date's day component '{day}'") from None

    try:
        return date(year_num, month_num, day_num)
    except ValueError as e:
        raise DateParseError(f"Invalid date '{text}': {e}") from None


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def days_from_today(value: date) -> int:
    return (value - today()).days

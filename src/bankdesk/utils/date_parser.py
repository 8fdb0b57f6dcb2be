"""Date parsing utilities for history filters."""

from datetime import date, datetime, time, timedelta, UTC
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - "today", "yesterday"
    - "N days ago", "N weeks ago", "N months ago"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    parts = text.split()
    if len(parts) == 3 and parts[2] == "ago" and parts[0].isdigit():
        count = int(parts[0])
        unit = parts[1].rstrip("s")
        if unit == "day":
            return today - timedelta(days=count)
        if unit == "week":
            return today - timedelta(weeks=count)
        if unit == "month":
            return today - relativedelta(months=count)
        raise ValueError(f"Unknown unit in '{date_str}'")

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def start_of_day(day: date) -> datetime:
    """Return the first instant (UTC) of a day."""
    return datetime.combine(day, time.min, tzinfo=UTC)


def end_of_day(day: date) -> datetime:
    """Return the first instant (UTC) after a day, for exclusive upper bounds."""
    return start_of_day(day) + timedelta(days=1)

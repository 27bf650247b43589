import calendar
import logging
import math
from datetime import date, datetime, time, timedelta, tzinfo

from renewal_engine.services.errors import DateOutOfRangeError

logger = logging.getLogger(__name__)

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def normalize_leap_year_date(year: int, month: int, day: int) -> date:
    """Build a date from a 0-indexed month, moving Feb 29 to Feb 28 outside leap years."""
    if month == 1 and day == 29 and not is_leap_year(year):
        logger.warning("Feb 29 normalized to Feb 28 for non-leap year %s", year)
        return date(year, 2, 28)
    return date(year, month + 1, day)


def anchored_datetime(year: int, month: int, day: int, at: time, zone: tzinfo) -> datetime:
    try:
        return datetime.combine(normalize_leap_year_date(year, month, day), at, tzinfo=zone)
    except (ValueError, OverflowError) as exc:
        raise DateOutOfRangeError(f"Cannot build a date in year {year}: {exc}") from exc


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), END_OF_DAY, tzinfo=value.tzinfo)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), START_OF_DAY, tzinfo=value.tzinfo)


def as_zone(value: datetime, zone: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def is_same_day(first: datetime, second: datetime) -> bool:
    return first.date() == second.date()


def is_on_or_after(first: datetime, second: datetime) -> bool:
    return first.date() >= second.date()


def days_between(start: datetime, end: datetime) -> int:
    """Whole calendar days from ``start`` to ``end``; negative when ``end`` is earlier."""
    delta = datetime.combine(end.date(), START_OF_DAY) - datetime.combine(start.date(), START_OF_DAY)
    return math.ceil(delta / timedelta(days=1))


def ordinal_suffix(day: int) -> str:
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_date_with_ordinal(value: date) -> str:
    return f"{calendar.month_name[value.month]} {value.day}{ordinal_suffix(value.day)}, {value.year}"

"""
Calendar helpers for the scheduling rules.

Weekdays are numbered Sunday-first (0 = Sunday ... 6 = Saturday), the numbering
stored in driver_monthly_dayoff.dayOfWeek. Python's date.weekday() is
Monday-first, so every conversion goes through sunday_based_weekday().
"""
import calendar
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.config import settings

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def sunday_based_weekday(d: date) -> int:
    """Weekday of d with 0 = Sunday."""
    return (d.weekday() + 1) % 7


def weekday_name(day_of_week: int) -> str:
    return WEEKDAY_NAMES[day_of_week]


def month_range(year: int, month: int) -> tuple[date, date]:
    """Inclusive (first_day, last_day) of the month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def iter_month(year: int, month: int):
    first, last = month_range(year, month)
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def dates_matching_weekday(year: int, month: int, weekday: int) -> list[date]:
    """
    Every date in the month whose weekday equals `weekday` (0 = Sunday),
    in ascending order.

    >>> dates_matching_weekday(2024, 2, 4)
    [datetime.date(2024, 2, 1), datetime.date(2024, 2, 8), datetime.date(2024, 2, 15), datetime.date(2024, 2, 22), datetime.date(2024, 2, 29)]
    """
    if not 0 <= weekday <= 6:
        raise ValueError(f"weekday must be between 0 (Sunday) and 6 (Saturday), got {weekday}")
    return [d for d in iter_month(year, month) if sunday_based_weekday(d) == weekday]


def today_local() -> date:
    """Today's date in the scheduling time zone."""
    return datetime.now(ZoneInfo(settings.SCHEDULE_TIMEZONE)).date()

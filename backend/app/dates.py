"""
Calendar-day helpers shared by the task model and the periodic engine.

Dates are stored as ISO strings (YYYY-MM-DD). Every comparison here works
at day granularity; time-of-day never takes part.
"""

from datetime import date, datetime, timedelta
from typing import Iterator


def today() -> date:
    """Current calendar day. Tests patch this to freeze the clock."""
    return date.today()


def adjusted_today(rollover_hour: int, now: datetime | None = None) -> date:
    """
    The diary's notion of "today".

    Between midnight and `rollover_hour` the previous day is still current,
    so a late-night entry lands on the day it belongs to.
    """
    now = now or datetime.now()
    if now.hour < rollover_hour:
        return now.date() - timedelta(days=1)
    return now.date()


def parse_date(value: str | date | None) -> date | None:
    """
    Parse a stored date value.

    Accepts plain dates, datetimes and ISO strings (a trailing time part is
    ignored). Empty or malformed input yields None instead of raising, so an
    odd record never breaks a whole list load.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def to_iso(day: date) -> str:
    return day.isoformat()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def is_overdue(value: str | date | None, reference: date | None = None) -> bool:
    """True iff `value` is a valid day strictly before `reference` (default: today)."""
    day = parse_date(value)
    if day is None:
        return False
    return day < (reference or today())


def step_days(start: date, frequency: int, end: date) -> Iterator[date]:
    """
    Yield start, start + frequency, start + 2*frequency, ... while <= end.

    Nothing is yielded when start is already past end. The walk stops before
    stepping past `end`, so huge frequencies never leave the date range.
    """
    if frequency <= 0:
        raise ValueError("frequency must be a positive number of days")
    current = start
    while current <= end:
        yield current
        if (end - current).days < frequency:
            return
        current = add_days(current, frequency)

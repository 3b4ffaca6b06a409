"""
Calendar date helpers.

All dates crossing the package boundary are ISO `YYYY-MM-DD` strings.
These helpers convert at the edges and do the day/month arithmetic.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[str, date]


def parse_iso_date(value: DateLike) -> date:
    """
    Parse an ISO calendar date.

    Accepts `date` objects (datetimes are truncated to their date) and
    `YYYY-MM-DD` strings. Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a calendar date: {value!r}")
    text = value.strip()
    if len(text) != 10:
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return datetime.strptime(text, "%Y-%m-%d").date()


def to_iso(value: DateLike) -> str:
    """Normalize a date or ISO string to `YYYY-MM-DD`."""
    return parse_iso_date(value).isoformat()


def is_iso_date(value) -> bool:
    try:
        parse_iso_date(value)
    except (ValueError, TypeError):
        return False
    return True


def add_days(value: DateLike, days: int) -> str:
    return (parse_iso_date(value) + timedelta(days=days)).isoformat()


def is_next_day(previous: DateLike, current: DateLike) -> bool:
    """True when `current` is exactly one calendar day after `previous`."""
    return parse_iso_date(current) - parse_iso_date(previous) == timedelta(days=1)


def iter_dates(start: DateLike, end: DateLike) -> Iterator[str]:
    """Yield ISO dates from start to end, both inclusive."""
    current = parse_iso_date(start)
    last = parse_iso_date(end)
    while current <= last:
        yield current.isoformat()
        current += timedelta(days=1)


def month_start(value: DateLike) -> date:
    return parse_iso_date(value).replace(day=1)


def month_end(value: DateLike) -> date:
    return month_start(value) + relativedelta(months=1, days=-1)


def add_months(value: DateLike, months: int) -> date:
    """Shift to the first day of the month `months` away."""
    return month_start(value) + relativedelta(months=months)


def parse_month(value: Union[str, date]) -> date:
    """
    Parse a `YYYY-MM` month key (or any date inside the month) to the
    first day of that month.
    """
    if isinstance(value, date):
        return month_start(value)
    text = str(value).strip()
    try:
        parsed = datetime.strptime(text, "%Y-%m").date()
    except ValueError:
        # Full ISO dates are accepted too
        try:
            parsed = parse_iso_date(text)
        except ValueError:
            raise ValueError(f"Expected YYYY-MM month, got {value!r}") from None
    return parsed.replace(day=1)


def month_key(value: DateLike) -> str:
    return parse_iso_date(value).strftime("%Y-%m")


def month_grid(year: int, month: int) -> List[date]:
    """
    Dates shown for one month in a Monday-first grid.

    Leading days of the previous month fill the first week, then every day
    of the month, then only as many days of the next month as are needed to
    complete the last week (never a full extra row).
    """
    first = date(year, month, 1)
    last = month_end(first)

    leading = first.weekday()  # Monday == 0
    days = [first - timedelta(days=i) for i in range(leading, 0, -1)]

    current = first
    while current <= last:
        days.append(current)
        current += timedelta(days=1)

    trailing = 6 - last.weekday()
    days.extend(last + timedelta(days=i) for i in range(1, trailing + 1))
    return days


def validate_range(start: Optional[DateLike], end: Optional[DateLike]) -> tuple:
    """
    Validate an optional inclusive ISO range.

    Returns (start_iso | None, end_iso | None); raises ValueError when a
    bound is not a date or start is after end.
    """
    start_iso = to_iso(start) if start else None
    end_iso = to_iso(end) if end else None
    if start_iso and end_iso and start_iso > end_iso:
        raise ValueError(f"Range start {start_iso} is after end {end_iso}")
    return start_iso, end_iso

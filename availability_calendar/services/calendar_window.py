"""
Calendar Window

The range of months currently loaded. Opens around a selected month with a
layout-dependent number of months and grows one page at a time in either
direction (infinite scrolling).
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple, Union

from ..config import settings
from ..utils.dates import add_months, month_end, month_grid, month_key, parse_iso_date, parse_month


class DeviceLayout(str, Enum):
    PHONE = "phone"
    TABLET = "tablet"
    TABLET_LANDSCAPE = "tablet_landscape"


def initial_month_count(layout: DeviceLayout) -> int:
    """Months shown on first open for a layout"""
    if layout == DeviceLayout.TABLET_LANDSCAPE:
        return settings.calendar_tablet_landscape_months
    if layout == DeviceLayout.TABLET:
        return settings.calendar_tablet_months
    return settings.calendar_phone_months


def page_month_count(layout: DeviceLayout) -> int:
    """Months added per page for a layout (one per grid column)"""
    if layout == DeviceLayout.TABLET_LANDSCAPE:
        return settings.calendar_tablet_landscape_page_months
    if layout == DeviceLayout.TABLET:
        return settings.calendar_tablet_page_months
    return settings.calendar_phone_page_months


def _check_month_count(months: int) -> int:
    if months < 1:
        raise ValueError(f"Month count must be at least 1, got {months}")
    return months


@dataclass(frozen=True)
class CalendarWindow:
    """
    Loaded months, as first-of-month dates (both ends inclusive).

    Immutable: extending returns a new window.
    """
    start: date
    end: date
    selected: date

    @classmethod
    def initial(
        cls,
        selected_month: Union[str, date],
        layout: DeviceLayout = DeviceLayout.PHONE,
        total_months: Optional[int] = None
    ) -> "CalendarWindow":
        """
        Window centred on `selected_month` (YYYY-MM).

        The extra month of an even count goes after the selected month.
        """
        selected = parse_month(selected_month)
        if total_months is None:
            total_months = initial_month_count(DeviceLayout(layout))
        total = _check_month_count(total_months)

        months_before = (total - 1) // 2
        months_after = total - 1 - months_before

        return cls(
            start=add_months(selected, -months_before),
            end=add_months(selected, months_after),
            selected=selected
        )

    def months(self) -> List[date]:
        result = []
        current = self.start
        while current <= self.end:
            result.append(current)
            current = add_months(current, 1)
        return result

    def month_keys(self) -> List[str]:
        return [month_key(m) for m in self.months()]

    def grids(self) -> List[Tuple[str, List[date]]]:
        """(YYYY-MM, Monday-first grid dates) for every loaded month"""
        return [(month_key(m), month_grid(m.year, m.month)) for m in self.months()]

    def date_bounds(self) -> Tuple[str, str]:
        """ISO first and last day covered by the window"""
        return self.start.isoformat(), month_end(self.end).isoformat()

    def contains(self, day) -> bool:
        value = parse_iso_date(day)
        return self.start <= value <= month_end(self.end)

    def previous_range(self, months: int) -> Tuple[str, str]:
        """ISO range of the months `extend_previous(months)` would add"""
        _check_month_count(months)
        first = add_months(self.start, -months)
        last = month_end(add_months(self.start, -1))
        return first.isoformat(), last.isoformat()

    def next_range(self, months: int) -> Tuple[str, str]:
        """ISO range of the months `extend_next(months)` would add"""
        _check_month_count(months)
        first = add_months(self.end, 1)
        last = month_end(add_months(self.end, months))
        return first.isoformat(), last.isoformat()

    def extend_previous(self, months: int) -> "CalendarWindow":
        return replace(self, start=add_months(self.start, -_check_month_count(months)))

    def extend_next(self, months: int) -> "CalendarWindow":
        return replace(self, end=add_months(self.end, _check_month_count(months)))

    def __str__(self) -> str:
        return f"{month_key(self.start)}..{month_key(self.end)}"

"""
Tests for CalendarWindow and date helpers

Tests cover:
- Initial month count per device layout
- Growing the window backwards/forwards
- Ranges fetched for a page of months
- Monday-first month grid
- ISO date parsing and range validation
"""

import pytest
from datetime import date

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from availability_calendar.services.calendar_window import CalendarWindow, DeviceLayout
from availability_calendar.utils.dates import (
    add_days,
    is_next_day,
    iter_dates,
    month_end,
    month_grid,
    parse_iso_date,
    parse_month,
    to_iso,
    validate_range
)


class TestInitialWindow:

    def test_phone_shows_three_months(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        assert window.month_keys() == ["2024-04", "2024-05", "2024-06"]
        assert window.selected == date(2024, 5, 1)

    def test_tablet_extra_month_goes_after(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.TABLET)

        assert window.month_keys() == ["2024-04", "2024-05", "2024-06", "2024-07"]

    def test_tablet_landscape_shows_six_months(self):
        window = CalendarWindow.initial("2024-05", "tablet_landscape")

        assert window.month_keys() == ["2024-03", "2024-04", "2024-05", "2024-06", "2024-07", "2024-08"]

    def test_explicit_total_and_year_boundary(self):
        window = CalendarWindow.initial("2024-01", total_months=3)

        assert window.month_keys() == ["2023-12", "2024-01", "2024-02"]
        assert window.date_bounds() == ("2023-12-01", "2024-02-29")

    def test_selected_month_accepts_dates(self):
        window = CalendarWindow.initial(date(2024, 5, 17), total_months=1)

        assert window.month_keys() == ["2024-05"]

    def test_invalid_month_rejected(self):
        with pytest.raises(ValueError):
            CalendarWindow.initial("May 2024")

    def test_zero_months_rejected(self):
        with pytest.raises(ValueError):
            CalendarWindow.initial("2024-05", total_months=0)


class TestWindowGrowth:

    def test_previous_range_covers_only_new_months(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        assert window.previous_range(2) == ("2024-02-01", "2024-03-31")

    def test_next_range_covers_only_new_months(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        assert window.next_range(1) == ("2024-07-01", "2024-07-31")

    def test_extend_returns_new_window(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        grown = window.extend_previous(1).extend_next(2)

        assert window.month_keys() == ["2024-04", "2024-05", "2024-06"]
        assert grown.month_keys() == ["2024-03", "2024-04", "2024-05", "2024-06", "2024-07", "2024-08"]
        assert grown.selected == window.selected
        assert str(grown) == "2024-03..2024-08"

    def test_extend_matches_ranges(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        start, _ = window.previous_range(3)
        _, end = window.next_range(3)

        assert window.extend_previous(3).extend_next(3).date_bounds() == (start, end)

    def test_non_positive_page_rejected(self):
        window = CalendarWindow.initial("2024-05")

        with pytest.raises(ValueError):
            window.extend_next(0)
        with pytest.raises(ValueError):
            window.previous_range(-1)

    def test_contains(self):
        window = CalendarWindow.initial("2024-05", DeviceLayout.PHONE)

        assert window.contains("2024-04-01")
        assert window.contains("2024-06-30")
        assert not window.contains("2024-07-01")
        assert not window.contains("2024-03-31")

    def test_grids(self):
        window = CalendarWindow.initial("2024-05", total_months=1)

        (key, grid), = window.grids()

        assert key == "2024-05"
        assert grid == month_grid(2024, 5)


class TestMonthGrid:

    def test_month_starting_on_monday(self):
        """April 2024 starts on a Monday: no leading days"""
        grid = month_grid(2024, 4)

        assert grid[0] == date(2024, 4, 1)
        assert grid[-1] == date(2024, 5, 5)
        assert len(grid) == 35

    def test_leading_and_trailing_days(self):
        """May 2024: Wed 1st .. Fri 31st"""
        grid = month_grid(2024, 5)

        assert grid[:2] == [date(2024, 4, 29), date(2024, 4, 30)]
        assert grid[-2:] == [date(2024, 6, 1), date(2024, 6, 2)]
        assert len(grid) % 7 == 0

    def test_month_ending_on_sunday_has_no_trailing_days(self):
        """March 2024 ends on a Sunday"""
        grid = month_grid(2024, 3)

        assert grid[-1] == date(2024, 3, 31)
        assert grid[0] == date(2024, 2, 26)

    def test_weeks_start_on_monday(self):
        for month in range(1, 13):
            grid = month_grid(2025, month)
            assert all(d.weekday() == 0 for d in grid[::7])
            assert len(grid) % 7 == 0


class TestDateHelpers:

    def test_parse_and_normalize(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)
        assert to_iso(date(2024, 1, 5)) == "2024-01-05"
        assert parse_month("2024-07") == date(2024, 7, 1)
        assert parse_month("2024-07-19") == date(2024, 7, 1)

    @pytest.mark.parametrize("value", ["2024-2-3", "2023-02-29", "", "20240101", None, 20240101])
    def test_invalid_dates(self, value):
        with pytest.raises(ValueError):
            parse_iso_date(value)

    def test_day_arithmetic(self):
        assert add_days("2024-12-31", 1) == "2025-01-01"
        assert is_next_day("2024-02-28", "2024-02-29")
        assert not is_next_day("2024-02-28", "2024-03-01")
        assert not is_next_day("2024-02-29", "2024-02-28")
        assert month_end("2023-02-10") == date(2023, 2, 28)

    def test_iter_dates_inclusive(self):
        assert list(iter_dates("2024-01-30", "2024-02-02")) == [
            "2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02"
        ]
        assert list(iter_dates("2024-01-02", "2024-01-01")) == []

    def test_validate_range(self):
        assert validate_range(None, None) == (None, None)
        assert validate_range("2024-01-01", None) == ("2024-01-01", None)
        with pytest.raises(ValueError):
            validate_range("2024-02-01", "2024-01-01")
        with pytest.raises(ValueError):
            validate_range("yesterday", None)

"""
Tests for calendar statistics

Tests cover:
- Status totals and rates
- Unique reservation counting
- Event span summary keys
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from availability_calendar.services.calendar_stats import calendar_statistics, event_span_summary
from availability_calendar.services.calendar_store import CalendarDataStore
from availability_calendar.services.event_merger import compute_events

from mock_calendar import available_month, booked_span, day, unavailable_span, with_overrides


class TestCalendarStatistics:

    def test_totals_and_rates(self):
        days = with_overrides(
            available_month(2024, 4),
            booked_span("2024-04-03", 3, "R1") + booked_span("2024-04-20", 3, "R2") + unavailable_span("2024-04-10", 3, "Maintenance")
        )
        store = CalendarDataStore(days)

        stats = calendar_statistics(store.get_all())

        assert stats.total_days == 30
        assert stats.booked_days == 6
        assert stats.unavailable_days == 3
        assert stats.available_days == 21
        assert stats.occupancy_rate == 0.2
        assert stats.unavailable_rate == 0.1
        assert stats.unique_reservations == 2
        assert stats.first_date == "2024-04-01"
        assert stats.last_date == "2024-04-30"

    def test_empty_calendar(self):
        stats = calendar_statistics([])

        assert stats.total_days == 0
        assert stats.occupancy_rate == 0.0
        assert stats.first_date is None
        assert stats.to_dict()["unique_reservations"] == 0

    def test_booked_without_reservation_counts_as_booked(self):
        store = CalendarDataStore([day("2024-04-01", "booked", note="Direct")])

        stats = calendar_statistics(store.get_all())

        assert stats.booked_days == 1
        assert stats.unique_reservations == 0

    def test_reservations_counted_on_any_status(self):
        """A checkout day marked unavailable still carries its reservation"""
        stay = booked_span("2024-04-01", 2, "R1")
        checkout = day("2024-04-03", "unavailable", note="Turnover", reservation=dict(stay[0]["reservation"]))
        other = day("2024-04-04", "unavailable", note="Turnover", reservation={"id": "R2"})
        store = CalendarDataStore(stay + [checkout, other])

        stats = calendar_statistics(store.get_all())

        assert stats.booked_days == 2
        assert stats.unique_reservations == 2


class TestEventSpanSummary:

    def test_counts_per_type_and_length(self):
        days = booked_span("2024-04-01", 3, "R1") + [day("2024-04-04")] + \
            booked_span("2024-04-05", 3, "R2") + [day("2024-04-08")] + \
            unavailable_span("2024-04-09", 1, "Blocked")

        summary = event_span_summary(compute_events(days).events)

        assert summary == {"booked_3days": 2, "unavailable_1days": 1}

    def test_empty(self):
        assert event_span_summary([]) == {}

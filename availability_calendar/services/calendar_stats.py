"""
Calendar statistics: occupancy figures for a day list and a summary of
event spans.
"""

from collections import Counter
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional

from ..schemas.calendar import CalendarEvent, DayRecord, DayStatus


@dataclass
class CalendarStats:
    """Status totals for a list of days"""
    total_days: int
    available_days: int
    booked_days: int
    unavailable_days: int
    occupancy_rate: float  # booked / total
    unavailable_rate: float  # unavailable / total
    unique_reservations: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def calendar_statistics(days: List[DayRecord]) -> CalendarStats:
    """Count days per status; rates are 0 for an empty list."""
    counts = Counter(day.status for day in days)
    total = len(days)
    reservation_ids = {day.reservation.id for day in days if day.reservation and day.reservation.id}
    dates = sorted(day.date for day in days)

    booked = counts.get(DayStatus.BOOKED, 0)
    unavailable = counts.get(DayStatus.UNAVAILABLE, 0)

    return CalendarStats(
        total_days=total,
        available_days=counts.get(DayStatus.AVAILABLE, 0),
        booked_days=booked,
        unavailable_days=unavailable,
        occupancy_rate=round(booked / total, 4) if total else 0.0,
        unavailable_rate=round(unavailable / total, 4) if total else 0.0,
        unique_reservations=len(reservation_ids),
        first_date=dates[0] if dates else None,
        last_date=dates[-1] if dates else None
    )


def event_span_summary(events: Iterable[CalendarEvent]) -> Dict[str, int]:
    """
    Number of events per type and length.

    Example: {"booked_3days": 4, "unavailable_1days": 2}
    """
    summary = Counter(f"{event.type.value}_{event.length}days" for event in events)
    return dict(sorted(summary.items()))

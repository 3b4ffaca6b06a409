"""
EventMerger Service

Turns a per-day availability feed into calendar events:
- Joins consecutive booked days of the same reservation into one stay
- Joins consecutive unavailable days with the same note into one block
- Gives every event day its position (start / middle / end / single)
- Reports data problems as diagnostics instead of raising

Pure computation: inputs are never mutated and nothing is logged.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..config import settings
from ..schemas.calendar import (
    CalendarEvent,
    CalendarEventDay,
    DayRecord,
    DayStatus,
    Diagnostic,
    DiagnosticKind,
    EventType,
    Reservation
)
from ..utils.dates import is_next_day
from .records import coerce_day_records


def _new_event_id() -> str:
    return str(uuid.uuid4())


@dataclass
class EventMergeResult:
    """Result of one full event computation"""
    events_by_date: Dict[str, CalendarEventDay]
    events: List[CalendarEvent]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def get(self, day: str) -> Optional[CalendarEventDay]:
        """Event day for an ISO date, None for available or unknown dates"""
        return self.events_by_date.get(day)


@dataclass
class _EventAccumulator:
    type: EventType
    label: str
    dates: List[str]


class EventMerger:
    """
    Detects events in a list of day records.

    Two days belong to the same event when they are calendar-consecutive,
    share a non-available status and
    - booked: carry the same reservation id, or failing that the same
      channel, guest name and check-in (fallback, reported as ambiguity)
    - unavailable: carry the same non-empty note
    """

    def __init__(
        self,
        allow_fallback_match: Optional[bool] = None,
        id_factory: Optional[Callable[[], str]] = None
    ):
        if allow_fallback_match is None:
            allow_fallback_match = settings.calendar_fallback_matching
        self.allow_fallback_match = allow_fallback_match
        self.id_factory = id_factory or _new_event_id

    def _match_reservations(self, first: Reservation, second: Reservation) -> Tuple[bool, bool]:
        """
        Compare two reservations.

        Returns (same_stay, matched_by_fallback).
        """
        if first.id and first.id == second.id:
            return True, False

        if not self.allow_fallback_match:
            return False, False

        # Every fallback field must be present; empty values never match
        first_key = (first.channel, first.guest_name, first.check_in)
        second_key = (second.channel, second.guest_name, second.check_in)
        if all(first_key) and first_key == second_key:
            return True, True

        return False, False

    def _is_partial_match(self, previous: DayRecord, current: DayRecord) -> bool:
        """Adjacent booked days whose ids differ but whose guest or check-in agree."""
        if not (previous.status == current.status == DayStatus.BOOKED):
            return False
        first, second = previous.reservation, current.reservation
        if first is None or second is None or (first.id and first.id == second.id):
            return False
        return any(
            a and a == b
            for a, b in ((first.guest_name, second.guest_name), (first.check_in, second.check_in))
        )

    def is_same_event(self, previous: DayRecord, current: DayRecord) -> Tuple[bool, bool]:
        """
        Identity half of the continuation check (adjacency is checked by
        the caller).

        Returns (same_event, matched_by_fallback).
        """
        if previous.status != current.status:
            return False, False

        if current.status == DayStatus.BOOKED:
            if previous.reservation is None or current.reservation is None:
                return False, False
            return self._match_reservations(previous.reservation, current.reservation)

        if current.status == DayStatus.UNAVAILABLE:
            return bool(current.note) and previous.note == current.note, False

        return False, False

    def _deduplicate(
        self,
        indexed: List[Tuple[int, DayRecord]],
        diagnostics: List[Diagnostic]
    ) -> List[DayRecord]:
        """Sort by date (stable) and keep the first record seen for each date."""
        ordered = sorted(indexed, key=lambda pair: pair[1].date)

        unique: List[DayRecord] = []
        seen = set()
        for index, record in ordered:
            if record.date in seen:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.DUPLICATE_DATE,
                    message=f"Duplicate day {record.date} ignored; first occurrence kept",
                    date=record.date,
                    index=index
                ))
                continue
            seen.add(record.date)
            unique.append(record)

        return unique

    def _detect_events(
        self,
        days: List[DayRecord],
        diagnostics: List[Diagnostic]
    ) -> Dict[str, _EventAccumulator]:
        """Single chronological walk grouping days into events."""
        events: Dict[str, _EventAccumulator] = {}
        current_event_id = None
        previous = None

        for day in days:
            if not day.is_event_day:
                # Available days close the running event
                current_event_id = None
                previous = day
                continue

            if day.is_malformed_booking:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.MALFORMED_RECORD,
                    message=f"Booked day {day.date} has no reservation; shown as a single-day event",
                    date=day.date
                ))

            continues = False
            if current_event_id is not None and previous is not None and is_next_day(previous.date, day.date):
                same_event, by_fallback = self.is_same_event(previous, day)
                continues = same_event
                if same_event and by_fallback:
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.EVENT_AMBIGUITY,
                        message=(
                            f"Reservation id changed from {previous.reservation.id!r} to "
                            f"{day.reservation.id!r} on {day.date}; joined by channel, guest and check-in"
                        ),
                        date=day.date
                    ))
                elif not same_event and self._is_partial_match(previous, day):
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.EVENT_AMBIGUITY,
                        message=(
                            f"Reservation id changed from {previous.reservation.id!r} to "
                            f"{day.reservation.id!r} on {day.date}; guest or check-in match, kept as separate stays"
                        ),
                        date=day.date
                    ))

            if continues:
                events[current_event_id].dates.append(day.date)
            else:
                current_event_id = self.id_factory()
                label = (day.reservation.channel if day.reservation else None) or day.note or ""
                events[current_event_id] = _EventAccumulator(
                    type=EventType(day.status.value),
                    label=label,
                    dates=[day.date]
                )

            previous = day

        return events

    def _project(
        self,
        accumulated: Dict[str, _EventAccumulator],
        diagnostics: List[Diagnostic]
    ) -> Tuple[Dict[str, CalendarEventDay], List[CalendarEvent]]:
        """Expand events into the per-date lookup."""
        events_by_date: Dict[str, CalendarEventDay] = {}
        events: List[CalendarEvent] = []

        for event_id, event in accumulated.items():
            dates = sorted(event.dates)
            length = len(dates)

            for position, day in enumerate(dates):
                existing = events_by_date.get(day)
                if existing is not None:
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.DATE_CONFLICT,
                        message=f"Day {day} assigned to events {existing.id} and {event_id}",
                        date=day
                    ))
                events_by_date[day] = CalendarEventDay(
                    id=event_id,
                    type=event.type,
                    label=event.label,
                    length=length,
                    event_day_index=position
                )

            events.append(CalendarEvent(
                id=event_id,
                type=event.type,
                label=event.label,
                dates=dates
            ))

        events.sort(key=lambda e: e.start)
        return events_by_date, events

    def compute_events(self, days: Iterable[Any]) -> EventMergeResult:
        """
        Compute events for a list of day records (any order).

        Accepts DayRecord models or raw mappings; unusable entries are
        skipped and reported. Available days never appear in the result.
        """
        indexed, diagnostics = coerce_day_records(days)
        unique_days = self._deduplicate(indexed, diagnostics)
        accumulated = self._detect_events(unique_days, diagnostics)
        events_by_date, events = self._project(accumulated, diagnostics)

        return EventMergeResult(
            events_by_date=events_by_date,
            events=events,
            diagnostics=diagnostics
        )


def compute_events(days: Iterable[Any], **options) -> EventMergeResult:
    """Compute events with a one-off EventMerger (options as for EventMerger)."""
    return EventMerger(**options).compute_events(days)

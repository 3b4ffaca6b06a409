# Schemas package
from .calendar import (
    DayStatus,
    EventType,
    DiagnosticKind,
    Reservation,
    DayRecord,
    CalendarEvent,
    CalendarEventDay,
    Diagnostic,
    MergeResponse,
    EventsResponse,
    CalendarStatsResponse
)

__all__ = [
    "DayStatus", "EventType", "DiagnosticKind",
    "Reservation", "DayRecord",
    "CalendarEvent", "CalendarEventDay", "Diagnostic",
    "MergeResponse", "EventsResponse", "CalendarStatsResponse"
]

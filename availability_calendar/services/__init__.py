# Services package
from .records import coerce_day_record, coerce_day_records
from .event_merger import EventMerger, EventMergeResult, compute_events
from .calendar_store import CalendarDataStore, MergeResult
from .calendar_window import CalendarWindow, DeviceLayout, initial_month_count, page_month_count
from .calendar_session import CalendarSession, LoadResult
from .calendar_stats import CalendarStats, calendar_statistics, event_span_summary

__all__ = [
    "coerce_day_record", "coerce_day_records",
    "EventMerger", "EventMergeResult", "compute_events",
    "CalendarDataStore", "MergeResult",
    "CalendarWindow", "DeviceLayout", "initial_month_count", "page_month_count",
    "CalendarSession", "LoadResult",
    "CalendarStats", "calendar_statistics", "event_span_summary"
]

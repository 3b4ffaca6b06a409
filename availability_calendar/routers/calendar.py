"""
Calendar API Router

Endpoints for merging day batches into the store and reading the computed
events.
"""

from typing import Any, List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from ..schemas.calendar import (
    DayRecord,
    MergeResponse,
    EventsResponse,
    CalendarStatsResponse
)
from ..services.calendar_store import CalendarDataStore
from ..services.calendar_stats import calendar_statistics, event_span_summary
from ..services.event_merger import EventMerger
from ..utils.dates import validate_range
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


def get_calendar_store(request: Request) -> CalendarDataStore:
    """The application's day store"""
    return request.app.state.calendar_store


def get_event_merger() -> EventMerger:
    return EventMerger()


def _parse_range(start: Optional[str], end: Optional[str]):
    try:
        return validate_range(start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _in_range(day: str, start: Optional[str], end: Optional[str]) -> bool:
    if start and day < start:
        return False
    if end and day > end:
        return False
    return True


# ==================
# Days
# ==================

@router.get("/days", response_model=List[DayRecord])
async def list_days(
    start: Optional[str] = Query(None, description="First ISO date (inclusive)"),
    end: Optional[str] = Query(None, description="Last ISO date (inclusive)"),
    store: CalendarDataStore = Depends(get_calendar_store)
):
    """Stored days, sorted by date"""
    start, end = _parse_range(start, end)
    return [day for day in store.get_all() if _in_range(day.date, start, end)]


@router.post("/days", response_model=MergeResponse)
async def merge_days(
    days: List[Any] = Body(...),
    store: CalendarDataStore = Depends(get_calendar_store)
):
    """
    Merge a batch of days.

    Already stored dates keep their record; invalid records are dropped and
    listed in `diagnostics` without failing the request.
    """
    result = store.merge_batch(days)

    logger.merge_applied(
        added=len(result.added),
        skipped=len(result.skipped),
        total=len(result.days),
        diagnostics=len(result.diagnostics)
    )

    return MergeResponse(
        added=result.added,
        skipped=result.skipped,
        total=len(result.days),
        diagnostics=result.diagnostics
    )


@router.delete("/days")
async def clear_days(store: CalendarDataStore = Depends(get_calendar_store)):
    """Drop every stored day"""
    removed = len(store)
    store.clear()
    logger.info(f"Calendar store cleared ({removed} days)")
    return {"cleared": removed}


# ==================
# Events
# ==================

@router.get("/events", response_model=EventsResponse)
async def list_events(
    start: Optional[str] = Query(None, description="First ISO date (inclusive)"),
    end: Optional[str] = Query(None, description="Last ISO date (inclusive)"),
    store: CalendarDataStore = Depends(get_calendar_store),
    merger: EventMerger = Depends(get_event_merger)
):
    """
    Events computed over every stored day.

    The range only filters the output; events crossing it keep their full
    length and day positions.
    """
    start, end = _parse_range(start, end)
    result = merger.compute_events(store.get_all())

    return EventsResponse(
        events_by_date={
            day: event_day
            for day, event_day in result.events_by_date.items()
            if _in_range(day, start, end)
        },
        events=[
            event for event in result.events
            if (not start or event.end >= start) and (not end or event.start <= end)
        ],
        diagnostics=result.diagnostics
    )


@router.get("/stats", response_model=CalendarStatsResponse)
async def get_stats(
    store: CalendarDataStore = Depends(get_calendar_store),
    merger: EventMerger = Depends(get_event_merger)
):
    """Occupancy figures and event span summary for the stored days"""
    days = store.get_all()
    stats = calendar_statistics(days)
    events = merger.compute_events(days).events

    return CalendarStatsResponse(
        **stats.to_dict(),
        event_span_summary=event_span_summary(events)
    )

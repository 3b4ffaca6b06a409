"""
Calendar Session

Wires a day-range source to the store and the event merger for one
calendar view:
1. Fetch the initial window of months
2. Grow the window backwards/forwards one page at a time
3. Recompute events after every change to the store

Fetches may run concurrently (previous and next at once). Merges into the
store are applied strictly in the order the loads were issued, whatever
order the fetches complete in.
"""

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..schemas.calendar import CalendarEvent, CalendarEventDay, DayRecord, Diagnostic
from ..utils.dates import to_iso
from ..utils.logging_config import get_logger
from .calendar_store import CalendarDataStore
from .calendar_window import CalendarWindow, DeviceLayout, page_month_count
from .event_merger import EventMerger, EventMergeResult

logger = get_logger(__name__)

# fetch_range(start_iso, end_iso) -> days, sync or async, both ends inclusive
FetchRange = Callable[[str, str], Union[Iterable[Any], Awaitable[Iterable[Any]]]]


@dataclass
class LoadResult:
    """Result of loading one range of months"""
    success: bool
    direction: str  # initial, previous, next
    start: Optional[str] = None
    end: Optional[str] = None
    added: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None
    skipped: bool = False  # a load in the same direction was already running
    stale: bool = False  # window re-centred while fetching; days merged, window not grown


def _pass_turn(previous: Optional[asyncio.Future], turn: asyncio.Future) -> None:
    """Release `turn` once every load issued before it has released its own."""
    if turn.done():
        return
    if previous is None or previous.done():
        turn.set_result(None)
    else:
        previous.add_done_callback(lambda _: turn.done() or turn.set_result(None))


class CalendarSession:
    """
    One calendar view: store + merger + window + day source.

    `page_months` overrides the per-layout page size.
    """

    def __init__(
        self,
        fetch_range: FetchRange,
        selected_month: Union[str, date],
        layout: DeviceLayout = DeviceLayout.PHONE,
        store: Optional[CalendarDataStore] = None,
        merger: Optional[EventMerger] = None,
        page_months: Optional[int] = None
    ):
        self.store = store if store is not None else CalendarDataStore()
        self.merger = merger or EventMerger()
        self.layout = DeviceLayout(layout)
        self.window = CalendarWindow.initial(selected_month, self.layout)

        self._page_months = page_months
        self._fetch_range = fetch_range
        self._generation = 0  # bumped whenever the window is re-centred
        self._tail: Optional[asyncio.Future] = None  # turn of the last issued load
        self._loading: List[Tuple[str, int]] = []

        self._result: EventMergeResult = self.merger.compute_events(self.store.get_all())
        self.store.subscribe(self._recompute)

    @property
    def page_months(self) -> int:
        if self._page_months is not None:
            return self._page_months
        return page_month_count(self.layout)

    # ==================
    # Event lookup
    # ==================

    def _recompute(self, days: List[DayRecord]) -> None:
        started = time.time()
        self._result = self.merger.compute_events(days)
        logger.events_recomputed(
            days=len(days),
            events=len(self._result.events),
            diagnostics=len(self._result.diagnostics),
            duration_ms=round((time.time() - started) * 1000, 2)
        )

    @property
    def events_by_date(self) -> Dict[str, CalendarEventDay]:
        return self._result.events_by_date

    @property
    def events(self) -> List[CalendarEvent]:
        return self._result.events

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Diagnostics of the latest event computation"""
        return self._result.diagnostics

    def event_for(self, day) -> Optional[CalendarEventDay]:
        try:
            return self._result.get(to_iso(day))
        except ValueError:
            return None

    @property
    def is_loading(self) -> bool:
        return bool(self._loading)

    def close(self) -> None:
        """Detach from the store (the store may outlive the session)."""
        self.store.unsubscribe(self._recompute)

    # ==================
    # Loading
    # ==================

    async def _fetch(self, start: str, end: str) -> List[Any]:
        days = self._fetch_range(start, end)
        if inspect.isawaitable(days):
            days = await days
        return list(days or [])

    async def _load(
        self,
        direction: str,
        start: str,
        end: str,
        grow: Optional[Callable[[CalendarWindow], CalendarWindow]] = None
    ) -> LoadResult:
        """
        Fetch one range and merge it.

        Everything up to the first await runs when the load is issued: the
        merge turn is taken and the window generation recorded there.
        """
        key = (direction, self._generation)
        if grow is not None and key in self._loading:
            return LoadResult(success=False, direction=direction, start=start, end=end, skipped=True)

        generation = self._generation
        previous, turn = self._tail, asyncio.get_running_loop().create_future()
        self._tail = turn
        self._loading.append(key)
        try:
            try:
                days = await self._fetch(start, end)
            except Exception as e:
                logger.load_failed(direction, start, end, str(e))
                return LoadResult(success=False, direction=direction, start=start, end=end, error=str(e))

            if previous is not None and not previous.done():
                await asyncio.shield(previous)

            merged = self.store.merge_batch(days)
            stale = generation != self._generation
            if grow is not None and not stale:
                self.window = grow(self.window)
        finally:
            _pass_turn(previous, turn)
            self._loading.remove(key)

        logger.merge_applied(
            added=len(merged.added),
            skipped=len(merged.skipped),
            total=len(merged.days),
            diagnostics=len(merged.diagnostics),
            window=str(self.window)
        )
        return LoadResult(
            success=True,
            direction=direction,
            start=start,
            end=end,
            added=merged.added,
            diagnostics=merged.diagnostics,
            stale=stale
        )

    async def initialize(self) -> LoadResult:
        """Fetch every day of the current window."""
        start, end = self.window.date_bounds()
        return await self._load("initial", start, end)

    async def select_month(
        self,
        selected_month: Union[str, date],
        layout: Optional[DeviceLayout] = None
    ) -> LoadResult:
        """
        Re-centre the window on another month and fetch it (known days are
        kept). Loads still in flight merge their days but no longer grow
        the window.
        """
        window = CalendarWindow.initial(selected_month, layout if layout is not None else self.layout)
        if layout is not None:
            self.layout = DeviceLayout(layout)
        self._generation += 1
        self.window = window
        return await self.initialize()

    async def load_previous_months(self, months: Optional[int] = None) -> LoadResult:
        """Fetch the months before the window, then grow it backwards."""
        if months is None:
            months = self.page_months
        start, end = self.window.previous_range(months)
        return await self._load("previous", start, end, lambda w: w.extend_previous(months))

    async def load_next_months(self, months: Optional[int] = None) -> LoadResult:
        """Fetch the months after the window, then grow it forwards."""
        if months is None:
            months = self.page_months
        start, end = self.window.next_range(months)
        return await self._load("next", start, end, lambda w: w.extend_next(months))

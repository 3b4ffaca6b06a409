"""
CalendarDataStore

Authoritative list of day records for the loaded calendar window.

- One record per date (first-seen-wins: a re-fetch never replaces a stored day)
- Kept sorted by date for the event merger
- Batch merges partially succeed; bad records are dropped and reported
- Listeners are told about every change with the full sorted list

No locking: callers serialize merges that target overlapping ranges.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..schemas.calendar import DayRecord, Diagnostic, DiagnosticKind
from ..utils.dates import to_iso
from .records import coerce_day_records

StoreListener = Callable[[List[DayRecord]], None]


@dataclass
class MergeResult:
    """Result of merging one batch of days"""
    days: List[DayRecord]
    added: List[str] = field(default_factory=list)  # dates inserted by this batch
    skipped: List[str] = field(default_factory=list)  # dates already stored
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added)


class CalendarDataStore:
    """
    In-memory day store keyed by ISO date.
    """

    def __init__(self, days: Optional[Iterable[Any]] = None):
        self._days: Dict[str, DayRecord] = {}
        self._sorted: List[DayRecord] = []
        self._listeners: List[StoreListener] = []
        if days:
            self.merge_batch(days)

    def __len__(self) -> int:
        return len(self._days)

    def __contains__(self, day) -> bool:
        try:
            return to_iso(day) in self._days
        except ValueError:
            return False

    def get(self, day) -> Optional[DayRecord]:
        """Stored record for a date, or None"""
        try:
            return self._days.get(to_iso(day))
        except ValueError:
            return None

    def get_all(self) -> List[DayRecord]:
        """All stored days, sorted by date (a copy)"""
        return list(self._sorted)

    def date_bounds(self) -> Optional[Tuple[str, str]]:
        """(first_date, last_date) of the stored days, None when empty"""
        if not self._sorted:
            return None
        return self._sorted[0].date, self._sorted[-1].date

    def subscribe(self, listener: StoreListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.get_all())

    def merge_batch(self, new_days: Iterable[Any]) -> MergeResult:
        """
        Merge a batch of days.

        Dates not yet stored are inserted; dates already stored keep their
        existing record. Repeats inside the batch keep the first occurrence.
        """
        indexed, diagnostics = coerce_day_records(new_days)

        added: List[str] = []
        skipped: List[str] = []
        batch_dates = set()

        for index, record in indexed:
            if record.date in batch_dates:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.DUPLICATE_DATE,
                    message=f"Day {record.date} appears more than once in the batch; first occurrence kept",
                    date=record.date,
                    index=index
                ))
                continue
            batch_dates.add(record.date)

            existing = self._days.get(record.date)
            if existing is not None:
                skipped.append(record.date)
                if existing != record:
                    diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.REFETCH_CONFLICT,
                        message=(
                            f"Re-fetched day {record.date} ({record.status.value}) differs from "
                            f"stored day ({existing.status.value}); stored day kept"
                        ),
                        date=record.date,
                        index=index
                    ))
                continue

            self._days[record.date] = record
            added.append(record.date)

        if added:
            # Stable re-sort; keys are unique so order is fully determined
            self._sorted = sorted(self._days.values(), key=lambda d: d.date)
            self._notify()

        return MergeResult(
            days=self.get_all(),
            added=added,
            skipped=skipped,
            diagnostics=diagnostics
        )

    def merge(self, new_days: Iterable[Any]) -> List[DayRecord]:
        """Merge a batch and return the full, deduplicated, date-sorted list."""
        return self.merge_batch(new_days).days

    def clear(self) -> None:
        """Drop every stored day (re-initialization, test setup)."""
        had_days = bool(self._days)
        self._days = {}
        self._sorted = []
        if had_days:
            self._notify()

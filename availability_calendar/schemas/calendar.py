from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from enum import Enum

from ..utils.dates import to_iso


class DayStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"


class EventType(str, Enum):
    """Statuses that form events (available days never do)"""
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"


class DiagnosticKind(str, Enum):
    MALFORMED_RECORD = "malformed_record"    # missing/invalid date, booked without reservation
    DUPLICATE_DATE = "duplicate_date"        # same date twice in one batch
    EVENT_AMBIGUITY = "event_ambiguity"      # joined by channel/guest/check-in, ids differ
    REFETCH_CONFLICT = "refetch_conflict"    # re-fetched date differs from the stored record
    DATE_CONFLICT = "date_conflict"          # date claimed by two events


class Reservation(BaseModel):
    """Guest stay shared by every booked day of the stay"""
    id: str
    channel: Optional[str] = None
    guest_name: Optional[str] = Field(None, alias="guestName")
    check_in: Optional[str] = Field(None, alias="checkIn")
    check_out: Optional[str] = Field(None, alias="checkOut")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator('check_in', 'check_out', mode='before')
    @classmethod
    def normalize_dates(cls, v):
        # Kept verbatim unless it is a real date object; these fields only
        # feed the fallback identity match.
        if v is None or isinstance(v, str):
            return v
        return to_iso(v)

    class Config:
        frozen = True
        populate_by_name = True


class DayRecord(BaseModel):
    """One calendar day of the availability feed"""
    date: str
    status: DayStatus
    note: Optional[str] = None
    reservation: Optional[Reservation] = None

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v):
        if v is None:
            raise ValueError("date is required")
        return to_iso(v)

    @property
    def is_event_day(self) -> bool:
        return self.status != DayStatus.AVAILABLE

    @property
    def is_malformed_booking(self) -> bool:
        return self.status == DayStatus.BOOKED and self.reservation is None

    class Config:
        frozen = True
        populate_by_name = True


class CalendarEvent(BaseModel):
    """A maximal run of consecutive days belonging to one stay or block"""
    id: str
    type: EventType
    label: str = ""
    dates: List[str]

    @property
    def start(self) -> str:
        return self.dates[0]

    @property
    def end(self) -> str:
        return self.dates[-1]

    @property
    def length(self) -> int:
        return len(self.dates)


class CalendarEventDay(BaseModel):
    """Position of one date inside its event"""
    id: str
    type: EventType
    label: str = ""
    length: int = Field(..., ge=1)
    event_day_index: int = Field(..., ge=0, alias="eventDayIndex")

    @property
    def is_start(self) -> bool:
        return self.event_day_index == 0

    @property
    def is_end(self) -> bool:
        return self.event_day_index == self.length - 1

    @property
    def is_single(self) -> bool:
        return self.length == 1

    class Config:
        frozen = True
        populate_by_name = True


class Diagnostic(BaseModel):
    """Non-fatal data problem reported alongside a result"""
    kind: DiagnosticKind
    message: str
    date: Optional[str] = None
    index: Optional[int] = None


# ==================
# API responses
# ==================

class MergeResponse(BaseModel):
    added: List[str]
    skipped: List[str]
    total: int
    diagnostics: List[Diagnostic] = []


class EventsResponse(BaseModel):
    events_by_date: Dict[str, CalendarEventDay]
    events: List[CalendarEvent]
    diagnostics: List[Diagnostic] = []


class CalendarStatsResponse(BaseModel):
    total_days: int
    available_days: int
    booked_days: int
    unavailable_days: int
    occupancy_rate: float
    unavailable_rate: float
    unique_reservations: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None
    event_span_summary: Dict[str, int] = {}

"""
Day record intake.

Turns whatever a day-range source hands over (DayRecord models or raw
mappings straight off the wire) into validated DayRecords. Invalid entries
are dropped and reported, never raised, so one bad day cannot sink a batch.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from ..schemas.calendar import DayRecord, Diagnostic, DiagnosticKind


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "record"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def coerce_day_record(item: Any, index: int) -> Tuple[Optional[DayRecord], Optional[Diagnostic]]:
    """
    Validate a single entry.

    Returns (record, None) on success or (None, diagnostic) when the entry
    cannot be used.
    """
    if isinstance(item, DayRecord):
        return item, None

    if not isinstance(item, Mapping):
        return None, Diagnostic(
            kind=DiagnosticKind.MALFORMED_RECORD,
            message=f"Unsupported day record type: {type(item).__name__}",
            index=index
        )

    raw_date = item.get("date")
    try:
        return DayRecord.model_validate(dict(item)), None
    except ValidationError as e:
        return None, Diagnostic(
            kind=DiagnosticKind.MALFORMED_RECORD,
            message=f"Dropped invalid day record ({_describe_validation_error(e)})",
            date=raw_date if isinstance(raw_date, str) else None,
            index=index
        )


def coerce_day_records(items: Iterable[Any]) -> Tuple[List[Tuple[int, DayRecord]], List[Diagnostic]]:
    """
    Validate a batch, keeping each record's position in the batch.

    Returns ([(index, record), ...], diagnostics).
    """
    records: List[Tuple[int, DayRecord]] = []
    diagnostics: List[Diagnostic] = []

    for index, item in enumerate(items or []):
        record, diagnostic = coerce_day_record(item, index)
        if diagnostic:
            diagnostics.append(diagnostic)
        else:
            records.append((index, record))

    return records, diagnostics

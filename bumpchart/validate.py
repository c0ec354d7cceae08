"""
Interval validation
Raw (id, start, end) rows -> Interval list, or every row error found
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Sequence

from bumpchart.model import Interval, RowError

REQUIRED_COLUMNS = ("id", "start", "end")
DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y", "%d.%m.%y", "%d-%m-%Y", "%Y%m%d")

# Data rows start after the header, which is row 1.
FIRST_DATA_ROW = 2


def parse_date(s: str) -> Optional[date]:
    if not s or not isinstance(s, str):
        return None
    s = s.strip()
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        parsed = None
    if parsed is None:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(s, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    # Time of day is dropped: occupancy is a calendar-date comparison.
    return parsed.date()


def _cell(row: Mapping[str, object], name: str) -> str:
    value = row.get(name)
    if value is None:
        return ""
    return str(value).strip()


def check_header(fields: Iterable[str]) -> list[str]:
    """Return the required columns missing from ``fields``, in canonical order."""
    present = {str(f).strip().lower() for f in fields if f is not None}
    return [c for c in REQUIRED_COLUMNS if c not in present]


def normalize_rows(rows: Iterable[Mapping[str, object]], fields: Sequence[str]) -> list[dict[str, object]]:
    """Re-key rows by the lowercase required column names.

    The first header matching a required column (case and surrounding
    whitespace ignored) wins; extra columns are dropped.
    """
    field_map: dict[str, str] = {}
    for f in fields:
        lowered = str(f).strip().lower()
        if lowered in REQUIRED_COLUMNS and lowered not in field_map:
            field_map[lowered] = f
    return [{name: row.get(actual) for name, actual in field_map.items()} for row in rows]


@dataclass(frozen=True)
class Validation:
    intervals: tuple[Interval, ...]
    errors: tuple[RowError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors and bool(self.intervals)

    @property
    def is_empty(self) -> bool:
        return not self.errors and not self.intervals

    @property
    def affected_rows(self) -> int:
        return len({e.row_number for e in self.errors})

    def messages(self, limit: Optional[int] = None) -> list[str]:
        errors = self.errors if limit is None else self.errors[:limit]
        return [str(e) for e in errors]


def _validate_row(row: Mapping[str, object], row_number: int) -> tuple[Optional[Interval], list[RowError]]:
    errors: list[RowError] = []
    id_val = _cell(row, "id")
    start_raw = _cell(row, "start")
    end_raw = _cell(row, "end")

    if not id_val:
        errors.append(RowError(row_number, "missing or empty 'id'"))

    start = parse_date(start_raw) if start_raw else None
    end = parse_date(end_raw) if end_raw else None

    if not start_raw:
        errors.append(RowError(row_number, "missing 'start'"))
    elif start is None:
        errors.append(RowError(row_number, f"invalid 'start' date -> \"{start_raw}\""))

    if not end_raw:
        errors.append(RowError(row_number, "missing 'end'"))
    elif end is None:
        errors.append(RowError(row_number, f"invalid 'end' date -> \"{end_raw}\""))

    if start is not None and end is not None and end < start:
        errors.append(RowError(row_number, f"'end' ({end_raw}) is before 'start' ({start_raw})"))

    if errors:
        return None, errors
    return Interval(id_val, start, end), errors


def validate_rows(rows: Iterable[Mapping[str, object]]) -> Validation:
    """Validate every row; errors are collected across the whole input."""
    intervals: list[Interval] = []
    errors: list[RowError] = []
    for idx, row in enumerate(rows):
        interval, row_errors = _validate_row(row, idx + FIRST_DATA_ROW)
        errors.extend(row_errors)
        if interval is not None:
            intervals.append(interval)
    if errors:
        return Validation(intervals=(), errors=tuple(errors))
    return Validation(intervals=tuple(intervals), errors=())

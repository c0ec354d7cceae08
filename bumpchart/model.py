"""Value types flowing through the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping


@dataclass(frozen=True)
class Interval:
    id: str
    start: date
    end: date

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("interval id must be non-empty")
        if self.end < self.start:
            raise ValueError(f"interval {self.id!r} ends ({self.end}) before it starts ({self.start})")

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class RowError:
    row_number: int  # 1-based, header is row 1
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.message}"


@dataclass(frozen=True)
class DayPoint:
    time: date
    occupancy: Mapping[str, int]


@dataclass(frozen=True)
class StackPoint:
    time: date
    baseline: int
    top: int

    @property
    def height(self) -> int:
        return self.top - self.baseline


@dataclass(frozen=True)
class StackLayout:
    """Renderer-facing result: one band per key, stacked from zero in key order."""

    keys: tuple[str, ...]
    series: dict[str, tuple[StackPoint, ...]]
    max_stack_height: int
    min_start: date
    max_end: date
    totals: tuple[int, ...] = field(default=())

    @property
    def days(self) -> tuple[date, ...]:
        first = self.series[self.keys[0]]
        return tuple(p.time for p in first)

    def first_active(self, key: str) -> StackPoint | None:
        return next((p for p in self.series[key] if p.height > 0), None)


@dataclass(frozen=True)
class ParsedTable:
    """What a CSV row source hands over: header names as written plus row mappings."""

    fields: list[str] = field(default_factory=list)
    rows: list[dict[str, object]] = field(default_factory=list)

"""
Per-layer analysis
Active ranges, gaps and same-id overlaps for each key, in inclusive whole days
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from bumpchart.model import Interval, StackLayout

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DayRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class LayerSummary:
    key: str
    active: tuple[DayRange, ...]
    gaps: tuple[DayRange, ...]
    overlaps: tuple[DayRange, ...]

    @property
    def active_days(self) -> int:
        return sum(r.days for r in self.active)

    @property
    def gap_days(self) -> int:
        return sum(r.days for r in self.gaps)


def merge_ranges(ranges: Sequence[DayRange]) -> list[DayRange]:
    """Merge overlapping or day-adjacent ranges."""
    if not ranges:
        return []
    sorted_r = sorted(ranges, key=lambda r: r.start)
    merged = [sorted_r[0]]
    for cur in sorted_r[1:]:
        last = merged[-1]
        if cur.start <= last.end + ONE_DAY:
            merged[-1] = DayRange(last.start, max(last.end, cur.end))
        else:
            merged.append(cur)
    return merged


def find_overlaps(ranges: Sequence[DayRange]) -> list[DayRange]:
    overlaps = []
    for i in range(len(ranges)):
        for j in range(i + 1, len(ranges)):
            a, b = ranges[i], ranges[j]
            start = max(a.start, b.start)
            end = min(a.end, b.end)
            if start <= end:
                overlaps.append(DayRange(start, end))
    return merge_ranges(overlaps)


def find_gaps(active: Sequence[DayRange], span_start: date, span_end: date) -> list[DayRange]:
    gaps = []
    pos = span_start
    for seg in active:
        if pos < seg.start:
            gaps.append(DayRange(pos, seg.start - ONE_DAY))
        pos = max(pos, seg.end + ONE_DAY)
    if pos <= span_end:
        gaps.append(DayRange(pos, span_end))
    return gaps


def summarize(intervals: Sequence[Interval], layout: StackLayout) -> list[LayerSummary]:
    by_key: dict[str, list[DayRange]] = {k: [] for k in layout.keys}
    for iv in intervals:
        by_key.setdefault(iv.id, []).append(DayRange(iv.start, iv.end))
    result = []
    for key in layout.keys:
        ranges = by_key[key]
        active = merge_ranges(ranges)
        result.append(LayerSummary(
            key=key,
            active=tuple(active),
            gaps=tuple(find_gaps(active, layout.min_start, layout.max_end)),
            overlaps=tuple(find_overlaps(ranges)),
        ))
    return result


def peak_days(layout: StackLayout) -> list[date]:
    return [d for d, total in zip(layout.days, layout.totals) if total == layout.max_stack_height]

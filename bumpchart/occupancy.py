"""
Occupancy builder
Validated intervals -> one row per calendar day, one 0/1 column per id
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Sequence

import pandas as pd

from bumpchart.model import DayPoint, Interval


def key_set(intervals: Sequence[Interval]) -> tuple[str, ...]:
    """Distinct ids in first-appearance order."""
    return tuple(dict.fromkeys(iv.id for iv in intervals))


@dataclass(frozen=True)
class Occupancy:
    keys: tuple[str, ...]
    frame: pd.DataFrame  # DatetimeIndex at daily frequency, columns = keys

    @property
    def min_start(self) -> date:
        return self.frame.index[0].date()

    @property
    def max_end(self) -> date:
        return self.frame.index[-1].date()

    def __len__(self) -> int:
        return len(self.frame.index)

    def iter_day_points(self) -> Iterator[DayPoint]:
        for ts, values in zip(self.frame.index, self.frame.to_numpy()):
            yield DayPoint(ts.date(), {k: int(v) for k, v in zip(self.keys, values)})

    @property
    def day_points(self) -> list[DayPoint]:
        return list(self.iter_day_points())


def build_occupancy(intervals: Sequence[Interval]) -> Occupancy:
    if not intervals:
        raise ValueError("build_occupancy needs at least one interval")

    keys = key_set(intervals)
    min_start = min(iv.start for iv in intervals)
    max_end = max(iv.end for iv in intervals)

    # Fixed one-day step on naive dates: no DST or month-length effects.
    days = pd.date_range(min_start, max_end, freq="D")
    frame = pd.DataFrame(0, index=days, columns=list(keys), dtype="int8")

    # Assignment (not addition) so overlapping intervals of one id count once.
    for iv in intervals:
        frame.loc[pd.Timestamp(iv.start):pd.Timestamp(iv.end), iv.id] = 1

    return Occupancy(keys=keys, frame=frame)

"""
Stack layout engine
Per-day occupancy -> cumulative [baseline, top] per key, stacked from zero in key order
"""

from __future__ import annotations

from typing import Sequence

from bumpchart.errors import StackContractError
from bumpchart.model import DayPoint, StackLayout, StackPoint


def stack_layers(days: Sequence[DayPoint], keys: Sequence[str]) -> StackLayout:
    """Stack each day's occupancy in the fixed order of ``keys``.

    No reordering and no offset: a key's baseline is the sum of the keys
    before it on that day, its top adds its own 0/1 occupancy.
    """
    if not keys:
        raise StackContractError("stack_layers needs at least one key")
    if not days:
        raise StackContractError("stack_layers needs at least one day")

    points: dict[str, list[StackPoint]] = {k: [] for k in keys}
    totals: list[int] = []
    for day in days:
        running = 0
        for key in keys:
            value = day.occupancy.get(key, 0)
            if value not in (0, 1):
                raise StackContractError(f"occupancy for {key!r} on {day.time} is {value!r}, expected 0 or 1")
            points[key].append(StackPoint(day.time, running, running + value))
            running += value
        totals.append(running)

    return StackLayout(
        keys=tuple(keys),
        series={k: tuple(v) for k, v in points.items()},
        max_stack_height=max(totals),
        min_start=days[0].time,
        max_end=days[-1].time,
        totals=tuple(totals),
    )

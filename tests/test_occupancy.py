"""
Semantic test: daily occupancy.

Invariant:
One row per calendar day from the earliest start to the latest end
(inclusive), and an id is 1 on a day iff one of its intervals covers it.
"""

from __future__ import annotations

from datetime import date

import pytest

from bumpchart.model import Interval
from bumpchart.occupancy import build_occupancy, key_set


def iv(key: str, start: str, end: str) -> Interval:
    return Interval(key, date.fromisoformat(start), date.fromisoformat(end))


def test_single_interval_three_days() -> None:
    occ = build_occupancy([iv("X", "2024-01-01", "2024-01-03")])

    points = occ.day_points
    assert [p.time for p in points] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert all(p.occupancy == {"X": 1} for p in points)
    assert occ.keys == ("X",)
    assert occ.min_start == date(2024, 1, 1)
    assert occ.max_end == date(2024, 1, 3)


def test_zero_duration_interval_is_one_active_day() -> None:
    occ = build_occupancy([iv("X", "2024-06-15", "2024-06-15")])

    assert len(occ) == 1
    assert occ.day_points[0].occupancy == {"X": 1}


def test_same_id_overlap_collapses(overlapping_same_id) -> None:
    occ = build_occupancy(overlapping_same_id)

    values = [p.occupancy["A"] for p in occ.day_points]
    assert values == [1] * 7


def test_gap_between_same_id_intervals_is_zero() -> None:
    occ = build_occupancy([iv("A", "2024-01-01", "2024-01-02"), iv("A", "2024-01-05", "2024-01-05")])

    assert [p.occupancy["A"] for p in occ.day_points] == [1, 1, 0, 0, 1]


def test_keys_in_first_appearance_order() -> None:
    intervals = [
        iv("C", "2024-01-05", "2024-01-06"),
        iv("A", "2024-01-01", "2024-01-02"),
        iv("C", "2024-01-01", "2024-01-01"),
        iv("B", "2024-01-03", "2024-01-03"),
    ]

    assert key_set(intervals) == ("C", "A", "B")
    assert build_occupancy(intervals).keys == ("C", "A", "B")


@pytest.mark.parametrize(
    "start, end, days",
    [
        ("2023-12-30", "2024-01-02", 4),  # year boundary
        ("2024-02-28", "2024-03-01", 3),  # leap day
        ("2023-02-28", "2023-03-01", 2),
        ("2024-03-09", "2024-03-11", 3),  # US DST change
        ("2024-10-26", "2024-10-28", 3),  # EU DST change
    ],
)
def test_every_calendar_day_counted_once(start: str, end: str, days: int) -> None:
    occ = build_occupancy([iv("A", start, end)])

    assert len(occ) == days
    times = [p.time for p in occ.day_points]
    assert len(set(times)) == days
    assert times == sorted(times)


def test_inactive_days_inside_span_are_zero() -> None:
    occ = build_occupancy([iv("A", "2024-01-01", "2024-01-01"), iv("B", "2024-01-03", "2024-01-03")])

    assert [dict(p.occupancy) for p in occ.day_points] == [
        {"A": 1, "B": 0},
        {"A": 0, "B": 0},
        {"A": 0, "B": 1},
    ]


def test_frame_matches_day_points() -> None:
    occ = build_occupancy([iv("A", "2024-01-01", "2024-01-02"), iv("B", "2024-01-02", "2024-01-03")])

    assert list(occ.frame.columns) == ["A", "B"]
    assert occ.frame.sum().to_dict() == {"A": 2, "B": 2}


def test_empty_input_is_a_contract_violation() -> None:
    with pytest.raises(ValueError):
        build_occupancy([])

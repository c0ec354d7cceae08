from __future__ import annotations

from datetime import date

import pytest

from bumpchart.model import Interval


def d(s: str) -> date:
    return date.fromisoformat(s)


@pytest.fixture
def make_rows():
    def _make(*triples: tuple[str, str, str]) -> list[dict[str, object]]:
        return [{"id": i, "start": s, "end": e} for i, s, e in triples]

    return _make


@pytest.fixture
def overlapping_same_id() -> list[Interval]:
    return [
        Interval("A", d("2024-01-01"), d("2024-01-05")),
        Interval("A", d("2024-01-03"), d("2024-01-07")),
    ]

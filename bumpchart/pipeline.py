"""
Pipeline entry point
Parsed table -> header check -> row validation -> occupancy -> stacked layout

Input problems come back as a ChartIssue; nothing here raises for bad data.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from bumpchart.model import StackLayout
from bumpchart.occupancy import build_occupancy
from bumpchart.settings import ChartSettings
from bumpchart.stacking import stack_layers
from bumpchart.validate import REQUIRED_COLUMNS, Validation, check_header, normalize_rows, validate_rows

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = (
    "No valid data found. Please check the CSV format (id, start, end) and ensure "
    "'start' and 'end' are valid date strings (e.g., 2024-01-30)."
)


class IssueKind(str, enum.Enum):
    HEADER = "header"
    ROWS = "rows"
    EMPTY = "empty"
    COMPUTATION = "computation"
    PARSE = "parse"
    SOURCE_UNAVAILABLE = "source_unavailable"


@dataclass(frozen=True)
class ChartIssue:
    kind: IssueKind
    messages: tuple[str, ...]
    total: int = 1  # before capping
    affected_rows: int = 0

    @property
    def text(self) -> str:
        lines = list(self.messages)
        hidden = self.total - len(self.messages)
        if hidden > 0:
            lines.append(f"... and {hidden} more error(s) in {self.affected_rows} row(s)")
        return "\n".join(lines)

    @classmethod
    def single(cls, kind: IssueKind, message: str) -> "ChartIssue":
        return cls(kind=kind, messages=(message,))


@dataclass(frozen=True)
class ChartResult:
    layout: Optional[StackLayout] = None
    issue: Optional[ChartIssue] = None
    validation: Optional[Validation] = None

    @property
    def ok(self) -> bool:
        return self.layout is not None and self.issue is None


def header_issue(missing: Sequence[str]) -> ChartIssue:
    return ChartIssue.single(
        IssueKind.HEADER,
        f"Missing required column(s): {', '.join(missing)}. Required: {', '.join(REQUIRED_COLUMNS)}.",
    )


def computation_issue(exc: BaseException) -> ChartIssue:
    return ChartIssue.single(IssueKind.COMPUTATION, f"Error while drawing chart: {exc}")


def parse_issue(exc: BaseException) -> ChartIssue:
    return ChartIssue.single(IssueKind.PARSE, f"Parse error: {exc}")


def build_chart(
    fields: Sequence[str],
    rows: Sequence[Mapping[str, object]],
    settings: Optional[ChartSettings] = None,
) -> ChartResult:
    settings = settings or ChartSettings()

    missing = check_header(fields)
    if missing:
        logger.warning("rejected input: missing columns %s", missing)
        return ChartResult(issue=header_issue(missing))

    validation = validate_rows(normalize_rows(rows, fields))
    if validation.errors:
        logger.warning(
            "rejected input: %d row error(s) in %d row(s)",
            len(validation.errors), validation.affected_rows,
        )
        issue = ChartIssue(
            kind=IssueKind.ROWS,
            messages=tuple(validation.messages(settings.max_reported_errors)),
            total=len(validation.errors),
            affected_rows=validation.affected_rows,
        )
        return ChartResult(issue=issue, validation=validation)
    if validation.is_empty:
        logger.warning("rejected input: no data rows")
        return ChartResult(issue=ChartIssue.single(IssueKind.EMPTY, EMPTY_MESSAGE), validation=validation)

    try:
        occupancy = build_occupancy(validation.intervals)
        layout = stack_layers(occupancy.day_points, occupancy.keys)
    except Exception as exc:  # contract violation, reported instead of crashing the host
        logger.exception("chart computation failed")
        return ChartResult(issue=computation_issue(exc), validation=validation)

    logger.debug(
        "built layout: %d key(s), %d day(s), max stack %d",
        len(layout.keys), len(layout.totals), layout.max_stack_height,
    )
    return ChartResult(layout=layout, validation=validation)

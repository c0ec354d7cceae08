"""
Bump Chart Viewer
Named date intervals -> per-day occupancy -> stacked layers ready for drawing
"""

from bumpchart.model import DayPoint, Interval, RowError, StackLayout, StackPoint
from bumpchart.occupancy import Occupancy, build_occupancy
from bumpchart.pipeline import ChartIssue, ChartResult, IssueKind, build_chart
from bumpchart.stacking import stack_layers
from bumpchart.validate import Validation, check_header, normalize_rows, validate_rows

__all__ = [
    "ChartIssue",
    "ChartResult",
    "DayPoint",
    "Interval",
    "IssueKind",
    "Occupancy",
    "RowError",
    "StackLayout",
    "StackPoint",
    "Validation",
    "build_chart",
    "build_occupancy",
    "check_header",
    "normalize_rows",
    "stack_layers",
    "validate_rows",
]

"""Exceptions for conditions that are not ordinary input problems.

Row-level validation problems are returned as data (see ``RowError``); these
are only raised across a boundary and converted to a ``ChartIssue`` there.
"""

from __future__ import annotations


class BumpChartError(Exception):
    """Base class for bump chart failures."""


class CsvParseError(BumpChartError):
    """The CSV collaborator could not turn the text into a table."""


class SourceUnavailableError(BumpChartError):
    """The CSV collaborator could not be loaded."""


class StackContractError(BumpChartError):
    """The stack layout engine received input the occupancy builder never produces."""

"""Collaborator protocols.

The pipeline never looks up a CSV parser or a drawing library on its own;
host code passes implementations of these protocols in.
"""

from __future__ import annotations

from typing import Any, Protocol

from bumpchart.model import ParsedTable, StackLayout


class RowSource(Protocol):
    """Turns CSV text into a header plus row mappings."""

    def parse(self, text: str) -> ParsedTable:
        """Return the parsed table or raise ``CsvParseError``."""


class ChartRenderer(Protocol):
    """Consumes a stacked layout and returns a drawable object (renderer-specific)."""

    def render(self, layout: StackLayout) -> Any:
        """Return the rendered chart."""

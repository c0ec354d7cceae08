"""
CSV row source backed by pandas
Header names are kept as written; every cell is read as text
"""

from __future__ import annotations

import io

import pandas as pd

from bumpchart.errors import CsvParseError
from bumpchart.model import ParsedTable

SAMPLE_CSV = """id,start,end
Project A,2024-01-01,2024-05-15
Project B,2024-02-10,2024-07-20
Project C,2024-04-01,2024-06-10
Project D,2024-05-01,2024-09-01
Project E,2024-06-15,2024-08-30
Project F,2024-01-20,2024-03-10
Project G,2024-02-15,2024-04-15
Project H,2024-07-01,2024-10-01"""


def _first_wins(fields: list[str], values: tuple) -> dict[str, object]:
    # A repeated header name keeps the value of its first column.
    row: dict[str, object] = {}
    for name, value in zip(fields, values):
        row.setdefault(name, value)
    return row


def decode_csv_bytes(data: bytes, encoding: str = "utf-8") -> str:
    """Decode an uploaded file, raising ``CsvParseError`` for undecodable bytes."""
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise CsvParseError(f"file is not valid {encoding} text ({e.reason} at byte {e.start})") from e


class PandasCsvSource:
    def parse(self, text: str) -> ParsedTable:
        if not text or not text.strip():
            return ParsedTable()
        try:
            # header=None so the header line fixes the row width: wider rows
            # are a tokenizing error instead of an implicit index.
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            return ParsedTable()
        except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
            raise CsvParseError(str(e)) from e
        # Short rows leave NaN even with keep_default_na=False.
        df = df.fillna("")
        fields = [str(v) for v in df.iloc[0]]
        rows = [_first_wins(fields, values) for values in df.iloc[1:].itertuples(index=False, name=None)]
        return ParsedTable(fields=fields, rows=rows)

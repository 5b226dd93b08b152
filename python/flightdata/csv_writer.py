"""CSV rendering of assembled tables.

Fields are joined with plain commas and never quoted.  A comma inside a column
name is escaped with a backslash, so every line of N columns has exactly N-1
separators.
"""

from __future__ import annotations

import csv
import io
from typing import Iterator, Sequence, TextIO

from .table import Row, TableGenerator


def format_row(row: Row) -> list[str]:
    """Render row slots as strings; empty slots become empty fields."""
    return ["" if v is None else str(v) for v in row]


def csv_lines(table: TableGenerator) -> Iterator[str]:
    """Yield the header line and then one line per row, without newlines."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="", quoting=csv.QUOTE_NONE,
                        escapechar="\\")

    def render(fields: Sequence[str]) -> str:
        # csv refuses a lone empty field without quoting
        if list(fields) == [""]:
            return ""
        buf.seek(0)
        buf.truncate()
        writer.writerow(fields)
        return buf.getvalue()

    yield render(table.column_names())
    for row in table.rows():
        yield render(format_row(row))


def write_csv(table: TableGenerator, stream: TextIO) -> int:
    """Write the whole table to ``stream``.  Returns the number of data rows."""
    lines = csv_lines(table)
    stream.write(next(lines) + "\n")
    count = 0
    for line in lines:
        stream.write(line + "\n")
        count += 1
    return count

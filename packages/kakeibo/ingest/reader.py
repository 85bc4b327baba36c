"""Delimited-table parsing with per-record error isolation.

Parsing follows RFC 4180 rules via the stdlib :mod:`csv` module (comma
separated, quoted fields with embedded commas and newlines, doubled quotes).
A malformed record is reported and skipped; it never discards the rest of the
statement.
"""

from __future__ import annotations

import csv
from io import StringIO

from ..models import RawRow, RowParseError
from .detect import split_lines


def _is_blank(record: list[str]) -> bool:
    return not any(cell.strip() for cell in record)


def _fit_to_header(record: list[str], width: int) -> list[str] | None:
    """Return ``record`` trimmed to ``width`` cells, or ``None`` on mismatch.

    Surplus cells are tolerated only when they are empty (trailing commas are
    common in bank exports).
    """

    if len(record) == width:
        return record
    if len(record) > width and _is_blank(record[width:]):
        return record[:width]
    return None


def parse_rows(text: str, header_line_index: int = 0) -> tuple[list[RawRow], list[RowParseError]]:
    """Parse ``text`` from ``header_line_index`` onward into header-keyed rows.

    Returns ``(rows, errors)``. Line numbers in errors are 1-based and refer to
    the original ``text`` (preamble included).

    Lines are re-joined with ``\\n`` after slicing at the header, so a quoted
    multi-line cell comes back with ``\\n`` even if the file used ``\\r\\n`` or
    ``\\r``. Cell text is otherwise kept as exported.
    """

    remainder = "\n".join(split_lines(text)[header_line_index:])
    reader = csv.reader(StringIO(remainder), strict=True)

    header: list[str] | None = None
    rows: list[RawRow] = []
    errors: list[RowParseError] = []
    consumed = 0  # physical lines consumed before the current record

    while True:
        line_no = header_line_index + consumed + 1
        try:
            record = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            errors.append(RowParseError(line_no, str(exc)))
            consumed = reader.line_num
            continue
        consumed = reader.line_num

        if _is_blank(record):
            continue
        if header is None:
            header = [name.strip() for name in record]
            continue

        fitted = _fit_to_header(record, len(header))
        if fitted is None:
            errors.append(
                RowParseError(
                    line_no,
                    f"expected {len(header)} fields but found {len(record)}",
                )
            )
            continue
        rows.append(dict(zip(header, fitted, strict=True)))

    return rows, errors


__all__ = ["parse_rows"]

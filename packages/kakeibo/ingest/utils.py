"""Ingest utilities shared by CLI commands and the batch importer.

Turns one exported statement (bytes or a path) into a :class:`ParseResult`:
decode with encoding fallback, detect the source format, slice at the header,
parse rows, and normalize them one at a time.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from ..models import (
    ParseResult,
    SourceKind,
    StatementFile,
    Transaction,
    UnrecognizedFormatError,
)
from ..normalizers import is_calendar_date, normalize_rows
from .encoding import decode_and_detect
from .reader import parse_rows

_logger = get_logger("kakeibo.ingest")


def parse_statement(statement: StatementFile) -> ParseResult:
    """Parse one statement file into transactions and per-row errors.

    An unrecognized file yields zero transactions and a single error line;
    malformed rows and rows without a calendar date yield one error each while
    the remaining rows are kept.
    """

    try:
        text, detection = decode_and_detect(statement.data, name=statement.name)
    except UnrecognizedFormatError as exc:
        _logger.warning("%s: %s", statement.name, exc)
        return ParseResult(statement.name, SourceKind.UNKNOWN, (), (str(exc),))

    rows, row_errors = parse_rows(text, detection.header_line_index)
    errors = [str(e) for e in row_errors]
    transactions: list[Transaction] = []
    for tx in normalize_rows(detection.source_kind, rows):
        # Rows the ledger cannot file under a month are reported, not imported.
        if not is_calendar_date(tx.date):
            errors.append(f"unrecognized date {tx.date!r} ({tx.description})")
            continue
        transactions.append(tx)
    _logger.info(
        "%s: detected %s at line %d; %d rows -> %d transactions, %d errors",
        statement.name,
        detection.source_kind,
        detection.header_line_index + 1,
        len(rows),
        len(transactions),
        len(errors),
    )
    return ParseResult(statement.name, detection.source_kind, tuple(transactions), tuple(errors))


def read_statement_file(path: str | PathLike[str]) -> StatementFile:
    p = Path(path)
    return StatementFile(name=p.name, data=p.read_bytes())


__all__ = ["parse_statement", "read_statement_file"]

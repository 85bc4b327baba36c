"""Data models and type aliases for ``kakeibo``.

Domain records are frozen ``dataclass`` instances so they can be passed
between pipeline stages without defensive copies; stages that change a record
return a new one via :func:`dataclasses.replace`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SourceKind(StrEnum):
    """Statement format reported by the format detector."""

    RAKUTEN = "RAKUTEN"
    PAYPAY = "PAYPAY"
    JP_BANK = "JP_BANK"
    UNKNOWN = "UNKNOWN"


class TransactionSource(StrEnum):
    """Origin of a ledger transaction."""

    RAKUTEN = "RAKUTEN"
    PAYPAY = "PAYPAY"
    JP_BANK = "JP_BANK"
    MANUAL = "MANUAL"


class CategoryType(StrEnum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


# Sentinel category id meaning "not yet classified".
UNRESOLVED_CATEGORY = "other"

# A single data line from a statement, keyed by header name.
type RawRow = dict[str, str]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


SUPPORTED_FORMATS_MESSAGE = (
    "Could not recognize the CSV format. Supported exports are PayPay, "
    "JP Bank (Yucho) and Rakuten Card standard CSV files."
)


class UnrecognizedFormatError(ValueError):
    """No header signature matched under any attempted encoding."""

    def __init__(self, message: str = SUPPORTED_FORMATS_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class RowParseError:
    """A single malformed data line (1-based line number in the source file)."""

    line: int
    reason: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.reason}"


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StatementFile:
    """Raw bytes of one exported statement plus a display name."""

    name: str
    data: bytes


@dataclass(frozen=True, slots=True)
class DetectionResult:
    source_kind: SourceKind
    header_line_index: int = 0

    @property
    def recognized(self) -> bool:
        return self.source_kind is not SourceKind.UNKNOWN


@dataclass(frozen=True, slots=True)
class Transaction:
    """Canonical ledger transaction.

    ``amount`` is a signed integer in yen: negative values leave the user,
    positive values arrive. ``is_excluded`` keeps the record for audit while
    removing it from income/expense aggregation (inter-account transfers that
    would otherwise be counted twice).
    """

    id: str
    date: str
    source: TransactionSource
    description: str
    amount: int
    category_id: str = UNRESOLVED_CATEGORY
    is_excluded: bool = False
    auto_category_reason: str | None = None
    original_row: Mapping[str, Any] = field(default_factory=dict)
    is_manual: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "source": str(self.source),
            "description": self.description,
            "amount": self.amount,
            "category_id": self.category_id,
            "is_excluded": self.is_excluded,
            "auto_category_reason": self.auto_category_reason,
            "original_row": dict(self.original_row),
            "is_manual": self.is_manual,
        }


@dataclass(frozen=True, slots=True)
class Category:
    """Read-only catalog entry; ``keywords`` are matched case-insensitively."""

    id: str
    name: str
    color: str
    keywords: tuple[str, ...] = ()
    type: CategoryType = CategoryType.EXPENSE


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing one statement file.

    ``errors`` holds human-readable lines: one per malformed row, or a single
    entry when the file format was not recognized.
    """

    name: str
    source_kind: SourceKind
    transactions: tuple[Transaction, ...] = ()
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FileOutcome:
    name: str
    source_kind: SourceKind
    parsed: int
    excluded: int
    appended: int
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ImportReport:
    """Per-file outcomes of a batch import plus the transactions to append."""

    files: tuple[FileOutcome, ...]
    appended: tuple[Transaction, ...]

    @property
    def errors(self) -> list[str]:
        return [f"{f.name}: {e}" for f in self.files for e in f.errors]


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    """Aggregated totals for a month (``"YYYY-MM"``) or ``None`` for all time.

    Excluded transactions contribute only to ``excluded``.
    """

    month: str | None
    income: int
    expense: int
    excluded: int
    expense_by_category: Mapping[str, int] = field(default_factory=dict)

    @property
    def balance(self) -> int:
        return self.income - self.expense


type Ledger = Sequence[Transaction]


__all__ = [
    "SourceKind",
    "TransactionSource",
    "CategoryType",
    "UNRESOLVED_CATEGORY",
    "RawRow",
    "SUPPORTED_FORMATS_MESSAGE",
    "UnrecognizedFormatError",
    "RowParseError",
    "StatementFile",
    "DetectionResult",
    "Transaction",
    "Category",
    "ParseResult",
    "FileOutcome",
    "ImportReport",
    "MonthlySummary",
    "Ledger",
]

"""Public interface for the ``kakeibo`` package.

Household ledger ingestion for Rakuten Card, PayPay and JP Bank CSV exports.
This module only re-exports the stable import surface.
"""

from .api import (
    delete_transaction_from_db,
    edit_transaction_in_db,
    import_paths_to_db,
    import_statements,
    record_manual_transaction,
    report_summary_from_db,
)
from .categorize import categorize_description, categorize_transactions
from .duplicates import dedupe, fingerprint
from .ingest import decode_and_detect, detect_format, load_text, parse_rows, parse_statement
from .models import (
    UNRESOLVED_CATEGORY,
    Category,
    CategoryType,
    DetectionResult,
    FileOutcome,
    ImportReport,
    MonthlySummary,
    ParseResult,
    RowParseError,
    SourceKind,
    StatementFile,
    Transaction,
    TransactionSource,
    UnrecognizedFormatError,
)
from .normalizers import new_manual_transaction, normalize_date, normalize_row
from .summary import available_months, summarize

__all__ = [
    # Pipeline
    "load_text",
    "decode_and_detect",
    "detect_format",
    "parse_rows",
    "normalize_row",
    "normalize_date",
    "new_manual_transaction",
    "categorize_description",
    "categorize_transactions",
    "fingerprint",
    "dedupe",
    "parse_statement",
    # API
    "import_statements",
    "import_paths_to_db",
    "record_manual_transaction",
    "edit_transaction_in_db",
    "delete_transaction_from_db",
    "report_summary_from_db",
    "summarize",
    "available_months",
    # Models
    "UNRESOLVED_CATEGORY",
    "Category",
    "CategoryType",
    "DetectionResult",
    "FileOutcome",
    "ImportReport",
    "MonthlySummary",
    "ParseResult",
    "RowParseError",
    "SourceKind",
    "StatementFile",
    "Transaction",
    "TransactionSource",
    "UnrecognizedFormatError",
]

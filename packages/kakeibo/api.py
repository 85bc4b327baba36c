"""Public API for the ``kakeibo`` package.

The in-memory functions (:func:`import_statements`, :func:`summarize`) take
the ledger and category catalog as plain sequences so they can run against any
store. The ``*_db`` helpers wire them to the SQLAlchemy ledger store.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from os import PathLike

from .categorize import categorize_transactions
from .duplicates import dedupe
from .ingest.utils import parse_statement, read_statement_file
from .logging_setup import get_logger
from .models import (
    Category,
    FileOutcome,
    ImportReport,
    SourceKind,
    StatementFile,
    Transaction,
)
from .normalizers import new_manual_transaction
from .summary import available_months, format_summary, summarize

_logger = get_logger("kakeibo.api")


def import_statements(
    files: Iterable[StatementFile],
    *,
    ledger: Sequence[Transaction],
    categories: Sequence[Category],
) -> ImportReport:
    """Parse, deduplicate and categorize a batch of statement files.

    Files are processed in order. Each file's transactions are deduplicated
    against the ledger plus everything appended by earlier files in the batch,
    then auto-categorized; the working ledger is extended only after a file's
    result is complete. An unrecognized file contributes zero transactions and
    one error without stopping the batch. ``ledger`` itself is not mutated.
    """

    working: list[Transaction] = list(ledger)
    appended: list[Transaction] = []
    outcomes: list[FileOutcome] = []

    for statement in files:
        result = parse_statement(statement)
        fresh = dedupe(working, result.transactions)
        categorized = categorize_transactions(fresh, categories)

        outcomes.append(
            FileOutcome(
                name=result.name,
                source_kind=result.source_kind,
                parsed=len(result.transactions),
                excluded=sum(1 for tx in result.transactions if tx.is_excluded),
                appended=len(categorized),
                errors=result.errors,
            )
        )
        working.extend(categorized)
        appended.extend(categorized)

    return ImportReport(files=tuple(outcomes), appended=tuple(appended))


def _read_paths(paths: Iterable[str | PathLike[str]]) -> tuple[list[StatementFile], list[FileOutcome]]:
    files: list[StatementFile] = []
    failures: list[FileOutcome] = []
    for p in paths:
        try:
            files.append(read_statement_file(p))
        except OSError as exc:
            _logger.warning("cannot read %s: %s", p, exc)
            failures.append(
                FileOutcome(str(p), SourceKind.UNKNOWN, 0, 0, 0, (f"cannot read file: {exc}",))
            )
    return files, failures


def import_paths_to_db(
    paths: Iterable[str | PathLike[str]],
    *,
    database_url: str | None = None,
    dry_run: bool = False,
) -> ImportReport:
    """Import statement files from disk into the ledger store.

    Reads the ledger and catalog snapshots, runs :func:`import_statements` and
    appends the result in one transaction (skipped when ``dry_run``). Files
    that cannot be read are reported like unrecognized ones.
    """

    from kakeibo_db.client import session_scope

    from .persistence import append_transactions, load_categories, load_ledger

    files, failures = _read_paths(paths)

    with session_scope(database_url=database_url) as session:
        ledger = load_ledger(session)
        categories = load_categories(session)
        if not categories:
            _logger.warning("category catalog is empty; transactions stay uncategorized")
        report = import_statements(files, ledger=ledger, categories=categories)
        if not dry_run:
            append_transactions(session, report.appended)

    return ImportReport(files=tuple(failures) + report.files, appended=report.appended)


def record_manual_transaction(
    *,
    date: str,
    description: str,
    amount: int,
    category_id: str | None = None,
    database_url: str | None = None,
) -> Transaction:
    """Append one manually entered transaction to the ledger store.

    Without ``category_id`` the description is auto-categorized against the
    stored catalog.
    """

    from kakeibo_db.client import session_scope

    from .persistence import append_transactions, load_categories

    tx = new_manual_transaction(
        date=date, description=description, amount=amount, category_id=category_id or "other"
    )
    with session_scope(database_url=database_url) as session:
        if category_id is None:
            (tx,) = categorize_transactions([tx], load_categories(session))
        append_transactions(session, [tx])
    return tx


def edit_transaction_in_db(
    tx_id: str,
    *,
    category_id: str | None = None,
    is_excluded: bool | None = None,
    database_url: str | None = None,
) -> Transaction:
    """Apply a manual review decision to one stored transaction."""

    from kakeibo_db.client import session_scope

    from .persistence import update_transaction

    with session_scope(database_url=database_url) as session:
        return update_transaction(
            session, tx_id, category_id=category_id, is_excluded=is_excluded
        )


def delete_transaction_from_db(tx_id: str, *, database_url: str | None = None) -> bool:
    from kakeibo_db.client import session_scope

    from .persistence import delete_transaction

    with session_scope(database_url=database_url) as session:
        return delete_transaction(session, tx_id)


def report_summary_from_db(*, month: str | None = None, database_url: str | None = None) -> str:
    """Render the income/expense summary for ``month`` (or all time) from the store."""

    from kakeibo_db.client import session_scope

    from .categories import category_names
    from .persistence import load_categories, load_ledger

    with session_scope(database_url=database_url) as session:
        ledger = load_ledger(session, month=month)
        categories = load_categories(session)
    return format_summary(summarize(ledger, month=month), category_names(categories))


__all__ = [
    "import_statements",
    "import_paths_to_db",
    "record_manual_transaction",
    "edit_transaction_in_db",
    "delete_transaction_from_db",
    "report_summary_from_db",
    "parse_statement",
    "summarize",
    "available_months",
]

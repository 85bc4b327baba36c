"""Persistence integration for the ledger store.

Functions here read and write through a caller-provided SQLAlchemy session
(see ``kakeibo_db.client.session_scope``); the caller owns the transaction.

Scope:
- Read the ledger snapshot used for duplicate detection and summaries.
- Append newly imported transactions (raw row kept as JSON).
- Edit or delete a single stored transaction.
- Read and reset the category catalog.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from kakeibo_db.models.ledger import KbCategory, KbTransaction

from .duplicates import fingerprint_sha256
from .logging_setup import get_logger
from .models import Category, CategoryType, Transaction, TransactionSource

_logger = get_logger("kakeibo.persistence")


def _to_row(tx: Transaction) -> KbTransaction:
    return KbTransaction(
        id=tx.id,
        date=tx.date,
        source=str(tx.source),
        description=tx.description,
        amount=tx.amount,
        category_id=tx.category_id,
        is_excluded=tx.is_excluded,
        auto_category_reason=tx.auto_category_reason,
        original_row=dict(tx.original_row),
        is_manual=tx.is_manual,
        fingerprint_sha256=fingerprint_sha256(tx),
    )


def _from_row(row: KbTransaction) -> Transaction:
    return Transaction(
        id=row.id,
        date=row.date,
        source=TransactionSource(row.source),
        description=row.description,
        amount=int(row.amount),
        category_id=row.category_id,
        is_excluded=bool(row.is_excluded),
        auto_category_reason=row.auto_category_reason,
        original_row=dict(row.original_row or {}),
        is_manual=bool(row.is_manual),
    )


def load_ledger(session: Session, *, month: str | None = None) -> list[Transaction]:
    """Return ledger transactions ordered by date text, optionally for one ``YYYY-MM``.

    Dates are stored as imported, so a month matches both the zero-padded
    (``2024-05-``) and the unpadded (``2024-5-``) prefix.
    """

    stmt = select(KbTransaction).order_by(KbTransaction.date, KbTransaction.created_at)
    if month is not None:
        year, mon = (int(p) for p in month.split("-", 1))
        stmt = stmt.where(
            or_(
                KbTransaction.date.startswith(f"{year:04d}-{mon:02d}-", autoescape=True),
                KbTransaction.date.startswith(f"{year}-{mon}-", autoescape=True),
            )
        )
    rows = session.execute(stmt).scalars().all()
    return [_from_row(r) for r in rows]


def append_transactions(session: Session, transactions: Iterable[Transaction]) -> int:
    """Insert ``transactions`` as new ledger rows and return how many were added.

    Duplicate filtering happens before this call. Dates are stored verbatim so
    that fingerprints computed from loaded rows match freshly parsed ones.
    """

    rows = [_to_row(tx) for tx in transactions]
    if not rows:
        return 0
    session.add_all(rows)
    session.flush()
    _logger.info("appended %d transactions to the ledger", len(rows))
    return len(rows)


def update_transaction(
    session: Session,
    tx_id: str,
    *,
    category_id: str | None = None,
    is_excluded: bool | None = None,
) -> Transaction:
    """Re-categorize or re-include a stored transaction and return the new record.

    Choosing a category by hand clears ``auto_category_reason``. Date, amount
    and description are immutable, so the fingerprint never changes.
    Raises ``LookupError`` for an unknown id.
    """

    row = session.get(KbTransaction, tx_id)
    if row is None:
        raise LookupError(f"no transaction with id {tx_id!r}")
    if category_id is not None:
        row.category_id = category_id
        row.auto_category_reason = None
    if is_excluded is not None:
        row.is_excluded = is_excluded
    session.flush()
    return _from_row(row)


def delete_transaction(session: Session, tx_id: str) -> bool:
    """Delete one transaction; returns ``False`` when the id is unknown."""

    row = session.get(KbTransaction, tx_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    _logger.info("deleted transaction %s", tx_id)
    return True


def load_categories(session: Session) -> list[Category]:
    rows = (
        session.execute(select(KbCategory).order_by(KbCategory.sort_order, KbCategory.id))
        .scalars()
        .all()
    )
    return [
        Category(
            id=r.id,
            name=r.name,
            color=r.color,
            keywords=tuple(r.keywords or ()),
            type=CategoryType(r.type),
        )
        for r in rows
    ]


def replace_categories(session: Session, categories: Sequence[Category]) -> int:
    """Replace the whole catalog, preserving the given order via ``sort_order``."""

    session.execute(delete(KbCategory))
    for order, c in enumerate(categories):
        session.add(
            KbCategory(
                id=c.id,
                name=c.name,
                color=c.color,
                keywords=list(c.keywords),
                type=str(c.type),
                sort_order=order,
            )
        )
    session.flush()
    return len(categories)


__all__ = [
    "load_ledger",
    "append_transactions",
    "update_transaction",
    "delete_transaction",
    "load_categories",
    "replace_categories",
]

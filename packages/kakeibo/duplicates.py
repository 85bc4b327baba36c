"""Content-based duplicate filtering against an existing ledger.

A transaction's fingerprint is the ``(date, amount, description)`` triple. Two
genuinely distinct purchases on the same day, for the same amount, at the same
merchant share a fingerprint, so re-importing a statement that contains such a
pair keeps only what the ledger does not already hold. Adding the source or the
raw row to the fingerprint would change which rows are considered re-imports,
so the triple is kept as is.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable

from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("kakeibo.duplicates")

type Fingerprint = tuple[str, int, str]


def fingerprint(tx: Transaction) -> Fingerprint:
    return (tx.date, tx.amount, tx.description)


def fingerprint_sha256(tx: Transaction) -> str:
    """SHA-256 over the fingerprint triple, used as an indexed column in the store."""

    data = json.dumps(list(fingerprint(tx)), separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def dedupe(existing: Iterable[Transaction], candidates: Iterable[Transaction]) -> list[Transaction]:
    """Return the candidates whose fingerprint is not already in ``existing``.

    Candidates are not compared with each other; input order is preserved.
    """

    seen = {fingerprint(tx) for tx in existing}
    kept: list[Transaction] = []
    dropped = 0
    for tx in candidates:
        if fingerprint(tx) in seen:
            dropped += 1
            continue
        kept.append(tx)
    if dropped:
        _logger.info("skipped %d already-imported transactions", dropped)
    return kept


__all__ = ["Fingerprint", "fingerprint", "fingerprint_sha256", "dedupe"]

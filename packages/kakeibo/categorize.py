"""Keyword-based auto-categorization.

Public API:
    - :func:`categorize_description`
    - :func:`categorize_transactions`

Only transactions still carrying the unresolved sentinel are touched; a
category decided earlier (e.g., by a bank whitelist rescue or by the user) is
never overridden.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from .logging_setup import get_logger
from .models import UNRESOLVED_CATEGORY, Category, Transaction

_logger = get_logger("kakeibo.categorize")


def categorize_description(description: str | None, categories: Sequence[Category]) -> str:
    """Return the id of the first category with a keyword in ``description``.

    Categories are scanned in the given order; matching is case-insensitive
    substring containment. Blank keywords never match.
    """

    if not description:
        return UNRESOLVED_CATEGORY
    lowered = description.lower()
    for category in categories:
        for keyword in category.keywords:
            kw = keyword.strip().lower()
            if kw and kw in lowered:
                return category.id
    return UNRESOLVED_CATEGORY


def categorize_transactions(
    transactions: Iterable[Transaction], categories: Sequence[Category]
) -> list[Transaction]:
    """Fill unresolved categories from ``categories``; other rows pass through."""

    out: list[Transaction] = []
    assigned = 0
    for tx in transactions:
        if tx.category_id != UNRESOLVED_CATEGORY:
            out.append(tx)
            continue
        category_id = categorize_description(tx.description, categories)
        if category_id != UNRESOLVED_CATEGORY:
            tx = replace(tx, category_id=category_id)
            assigned += 1
        out.append(tx)
    _logger.debug("auto-categorized %d of %d transactions", assigned, len(out))
    return out


__all__ = ["categorize_description", "categorize_transactions"]

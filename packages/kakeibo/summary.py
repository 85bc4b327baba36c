"""Income/expense aggregation over the ledger.

Excluded transactions (inter-account transfers) never count as income or
expense; their absolute amounts are reported separately so the user can see
how much was suppressed.
"""

from __future__ import annotations

import unicodedata
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from .models import MonthlySummary, Transaction


def month_key(date: str) -> str | None:
    """``YYYY-MM`` for a stored date (padded or not), or ``None`` if it has no month."""

    parts = date.split("-")
    if len(parts) < 2 or not (parts[0].isdigit() and parts[1].isdigit()):
        return None
    return f"{int(parts[0]):04d}-{int(parts[1]):02d}"


def available_months(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct ``YYYY-MM`` values, newest first."""

    months = {month_key(tx.date) for tx in transactions}
    return sorted((m for m in months if m is not None), reverse=True)


def summarize(
    transactions: Iterable[Transaction],
    *,
    month: str | None = None,
    category_ids: Sequence[str] | None = None,
) -> MonthlySummary:
    """Aggregate ``transactions`` for ``month`` (``YYYY-MM``) or all time.

    When ``category_ids`` is given, only those categories are counted.
    """

    income = 0
    expense = 0
    excluded = 0
    by_category: dict[str, int] = defaultdict(int)
    wanted = set(category_ids) if category_ids is not None else None

    for tx in transactions:
        if month is not None and month_key(tx.date) != month:
            continue
        if wanted is not None and tx.category_id not in wanted:
            continue
        if tx.is_excluded:
            excluded += abs(tx.amount)
        elif tx.amount > 0:
            income += tx.amount
        elif tx.amount < 0:
            expense += -tx.amount
            by_category[tx.category_id] += -tx.amount

    ordered = dict(sorted(by_category.items(), key=lambda kv: (-kv[1], kv[0])))
    return MonthlySummary(month, income, expense, excluded, ordered)


# ---- Text rendering ---------------------------------------------------------


def _display_width(text: str) -> int:
    # Wide and full-width characters occupy two terminal columns.
    return sum(2 if unicodedata.east_asian_width(ch) in "WF" else 1 for ch in text)


def _pad(text: str, width: int, *, right: bool = False) -> str:
    fill = " " * max(0, width - _display_width(text))
    return fill + text if right else text + fill


def _format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [_display_width(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], _display_width(cell))

    def format_row(row: Sequence[str]) -> str:
        return " | ".join(_pad(cell, widths[i], right=i > 0) for i, cell in enumerate(row))

    lines = [format_row(headers), "-+-".join("-" * w for w in widths)]
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines)


def format_summary(summary: MonthlySummary, category_names: Mapping[str, str]) -> str:
    """Render a summary as a plain-text report with a per-category table."""

    title = f"Summary for {summary.month}" if summary.month else "Summary (all months)"
    totals = _format_table(
        ["Total", "Yen"],
        [
            ["Income", f"{summary.income:,}"],
            ["Expense", f"{summary.expense:,}"],
            ["Balance", f"{summary.balance:,}"],
            ["Excluded", f"{summary.excluded:,}"],
        ],
    )
    rows = [
        [category_names.get(cid, cid), f"{amount:,}"]
        for cid, amount in summary.expense_by_category.items()
    ]
    by_category = _format_table(["Category", "Expense"], rows)
    return "\n\n".join([title, totals, by_category])


__all__ = ["month_key", "available_months", "summarize", "format_summary"]

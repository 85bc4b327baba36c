from __future__ import annotations

from kakeibo import Transaction, TransactionSource, available_months, summarize
from kakeibo.summary import format_summary, month_key


def _tx(date: str, amount: int, category_id: str = "other", *, excluded: bool = False) -> Transaction:
    return Transaction(
        id=f"{date}{amount}",
        date=date,
        source=TransactionSource.JP_BANK,
        description="x",
        amount=amount,
        category_id=category_id,
        is_excluded=excluded,
    )


LEDGER = [
    _tx("2024-04-30", -900, "food"),
    _tx("2024-05-01", 250000, "income"),
    _tx("2024-05-02", -1200, "food"),
    _tx("2024-05-03", -7000, "utilities"),
    _tx("2024-05-03", -3000, "other", excluded=True),
    _tx("2024-05-10", 3000, "other", excluded=True),
    _tx("2024-05-11", -800, "food"),
]


def test_excluded_rows_never_count_as_income_or_expense():
    s = summarize(LEDGER, month="2024-05")
    assert (s.income, s.expense, s.excluded) == (250000, 9000, 6000)
    assert s.balance == 241000
    assert dict(s.expense_by_category) == {"utilities": 7000, "food": 2000}
    assert list(s.expense_by_category) == ["utilities", "food"]


def test_all_time_summary():
    s = summarize(LEDGER)
    assert s.month is None
    assert s.expense == 9900


def test_category_filter():
    s = summarize(LEDGER, month="2024-05", category_ids=["food"])
    assert (s.income, s.expense, s.excluded) == (0, 2000, 0)


def test_available_months_newest_first():
    assert available_months(LEDGER) == ["2024-05", "2024-04"]


def test_format_summary_uses_category_names():
    text = format_summary(summarize(LEDGER, month="2024-05"), {"food": "食費"})
    assert text.startswith("Summary for 2024-05")
    assert "250,000" in text
    assert "食費" in text
    # Unknown ids fall back to the raw id.
    assert "utilities" in text


def test_unpadded_dates_belong_to_their_month():
    ledger = [_tx("2024-5-3", -100, "food"), _tx("2024-05-20", -200, "food"), _tx("2024-12-1", -50)]
    assert summarize(ledger, month="2024-05").expense == 300
    assert available_months(ledger) == ["2024-12", "2024-05"]
    assert month_key("R06-05-03") is None

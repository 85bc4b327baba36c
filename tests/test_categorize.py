from __future__ import annotations

from kakeibo import Category, Transaction, TransactionSource, categorize_description, categorize_transactions
from kakeibo.categories import DEFAULT_CATEGORIES


def _tx(description: str, *, category_id: str = "other", amount: int = -500) -> Transaction:
    return Transaction(
        id=description,
        date="2024-05-03",
        source=TransactionSource.PAYPAY,
        description=description,
        amount=amount,
        category_id=category_id,
    )


def test_first_category_in_catalog_order_wins():
    categories = [
        Category("a", "A", "#000", ("コンビニ",)),
        Category("b", "B", "#000", ("コンビニ",)),
    ]
    assert categorize_description("コンビニA", categories) == "a"
    assert categorize_description("コンビニA", list(reversed(categories))) == "b"


def test_matching_is_case_insensitive_substring():
    assert categorize_description("NETFLIX.COM", DEFAULT_CATEGORIES) == "subscription"
    assert categorize_description("モバイルsuicaチャージ", DEFAULT_CATEGORIES) == "transport"


def test_no_match_and_empty_description_fall_back_to_other():
    assert categorize_description("謎の店", DEFAULT_CATEGORIES) == "other"
    assert categorize_description("", DEFAULT_CATEGORIES) == "other"
    assert categorize_description(None, DEFAULT_CATEGORIES) == "other"


def test_blank_keywords_never_match():
    categories = [Category("blank", "Blank", "#000", ("", "  ")), Category("food", "Food", "#000", ("食",))]
    assert categorize_description("外食", categories) == "food"
    assert categorize_description("anything", categories) == "other"


def test_decided_categories_are_never_overridden():
    rescued = _tx("カード 三井住友", category_id="credit_card")
    manual = _tx("コンビニで買い物", category_id="social")
    pending = _tx("コンビニA")
    out = categorize_transactions([rescued, manual, pending], DEFAULT_CATEGORIES)
    assert [tx.category_id for tx in out] == ["credit_card", "social", "food"]
    # Inputs are immutable; a new record is produced for the assigned one.
    assert pending.category_id == "other"
    assert out[0] is rescued


def test_excluded_rows_are_still_categorized():
    tx = Transaction(
        id="x",
        date="2024-05-03",
        source=TransactionSource.RAKUTEN,
        description="ペイペイ チャージ コンビニ",
        amount=-1000,
        is_excluded=True,
    )
    (out,) = categorize_transactions([tx], DEFAULT_CATEGORIES)
    assert out.category_id == "food"
    assert out.is_excluded

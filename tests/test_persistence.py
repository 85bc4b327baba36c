# ruff: noqa: E501
from __future__ import annotations

import pytest

from kakeibo import Transaction, TransactionSource, new_manual_transaction
from kakeibo.categories import DEFAULT_CATEGORIES
from kakeibo.duplicates import dedupe, fingerprint, fingerprint_sha256
from kakeibo.persistence import (
    append_transactions,
    delete_transaction,
    load_categories,
    load_ledger,
    replace_categories,
    update_transaction,
)
from kakeibo_db.client import session_scope
from kakeibo_db.models.ledger import KbTransaction
from sqlalchemy import select


def _tx(tx_id: str, date: str, amount: int, **kw) -> Transaction:
    return Transaction(
        id=tx_id,
        date=date,
        source=TransactionSource.JP_BANK,
        description=kw.pop("description", "口座振替 ｷｮｳｴｲｶﾞｽ"),
        amount=amount,
        **kw,
    )


def test_append_and_load_round_trip(db_url: str):
    txs = [
        _tx(
            "00000000-0000-0000-0000-000000000001",
            "2024-05-05",
            -7000,
            category_id="utilities",
            auto_category_reason="auto: utility bill",
            original_row={"取引日": "20240505", "詳細２": "ｷｮｳｴｲｶﾞｽ"},
        ),
        _tx("00000000-0000-0000-0000-000000000002", "2024-04-30", -3000, is_excluded=True),
        new_manual_transaction(date="2024-05-06", description="八百屋", amount=-850),
    ]
    with session_scope(database_url=db_url) as session:
        assert append_transactions(session, txs) == 3

    with session_scope(database_url=db_url) as session:
        ledger = load_ledger(session)
        stored = session.execute(
            select(KbTransaction.fingerprint_sha256).where(KbTransaction.id == txs[0].id)
        ).scalar_one()

    assert [tx.date for tx in ledger] == ["2024-04-30", "2024-05-05", "2024-05-06"]
    assert ledger[1] == txs[0]
    assert ledger[2].is_manual and ledger[2].source is TransactionSource.MANUAL
    assert stored == fingerprint_sha256(txs[0])


def test_load_ledger_month_filter(db_url: str):
    with session_scope(database_url=db_url) as session:
        append_transactions(
            session,
            [
                _tx("a", "2024-11-30", -1),
                _tx("b", "2024-12-01", -2),
                _tx("c", "2024-12-31", -3),
                _tx("d", "2025-01-01", -4),
            ],
        )
    with session_scope(database_url=db_url) as session:
        assert [tx.id for tx in load_ledger(session, month="2024-12")] == ["b", "c"]


def test_dates_are_stored_verbatim_so_fingerprints_round_trip(db_url: str):
    tx = _tx("x", "2024-5-3", -100, description="コンビニA")
    with session_scope(database_url=db_url) as session:
        append_transactions(session, [tx])
    with session_scope(database_url=db_url) as session:
        (loaded,) = load_ledger(session)
    assert loaded.date == "2024-5-3"
    assert fingerprint(loaded) == fingerprint(tx)
    assert dedupe([loaded], [_tx("y", "2024-5-3", -100, description="コンビニA")]) == []


def test_month_filter_matches_unpadded_dates(db_url: str):
    with session_scope(database_url=db_url) as session:
        append_transactions(
            session,
            [_tx("a", "2024-5-3", -1), _tx("b", "2024-05-04", -2), _tx("c", "2024-5-30", -3), _tx("d", "2024-6-1", -4)],
        )
    with session_scope(database_url=db_url) as session:
        assert sorted(tx.id for tx in load_ledger(session, month="2024-05")) == ["a", "b", "c"]


def test_update_transaction_applies_review_decision(db_url: str):
    flagged = _tx("r", "2024-05-07", -4000, description="自払 ﾃﾞﾝﾜ", auto_category_reason="auto: needs manual review")
    with session_scope(database_url=db_url) as session:
        append_transactions(session, [flagged])
        updated = update_transaction(session, "r", category_id="utilities")
    assert (updated.category_id, updated.auto_category_reason, updated.is_excluded) == ("utilities", None, False)

    with session_scope(database_url=db_url) as session:
        update_transaction(session, "r", is_excluded=True)
    with session_scope(database_url=db_url) as session:
        (stored,) = load_ledger(session)
    assert (stored.category_id, stored.is_excluded) == ("utilities", True)
    assert fingerprint(stored) == fingerprint(flagged)


def test_update_unknown_transaction_raises(db_url: str):
    with pytest.raises(LookupError):
        with session_scope(database_url=db_url) as session:
            update_transaction(session, "missing", category_id="food")


def test_delete_transaction(db_url: str):
    with session_scope(database_url=db_url) as session:
        append_transactions(session, [_tx("a", "2024-05-03", -1), _tx("b", "2024-05-04", -2)])
    with session_scope(database_url=db_url) as session:
        assert delete_transaction(session, "a") is True
        assert delete_transaction(session, "a") is False
    with session_scope(database_url=db_url) as session:
        assert [tx.id for tx in load_ledger(session)] == ["b"]


def test_replace_categories_preserves_order(db_url: str):
    reordered = list(reversed(DEFAULT_CATEGORIES))
    with session_scope(database_url=db_url) as session:
        assert replace_categories(session, reordered) == len(DEFAULT_CATEGORIES)
    with session_scope(database_url=db_url) as session:
        assert load_categories(session) == reordered

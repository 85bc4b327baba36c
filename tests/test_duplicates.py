from __future__ import annotations

import random

from kakeibo import Transaction, TransactionSource, dedupe, fingerprint
from kakeibo.duplicates import fingerprint_sha256


def _tx(tx_id: str, date: str, amount: int, description: str, **kw) -> Transaction:
    return Transaction(
        id=tx_id,
        date=date,
        source=kw.pop("source", TransactionSource.RAKUTEN),
        description=description,
        amount=amount,
        **kw,
    )


LEDGER = [
    _tx("1", "2024-05-01", -500, "コンビニA"),
    _tx("2", "2024-05-02", -1200, "スーパーB"),
    _tx("3", "2024-05-03", 250000, "給与"),
    _tx("4", "2024-05-04", -3000, "PAYPAY", is_excluded=True),
]


def test_fingerprint_ignores_id_source_and_raw_row():
    a = _tx("a", "2024-05-01", -500, "コンビニA", original_row={"x": "1"})
    b = _tx("b", "2024-05-01", -500, "コンビニA", source=TransactionSource.PAYPAY)
    assert fingerprint(a) == fingerprint(b) == ("2024-05-01", -500, "コンビニA")
    assert fingerprint_sha256(a) == fingerprint_sha256(b)
    assert len(fingerprint_sha256(a)) == 64


def test_reimporting_a_permuted_subset_adds_nothing():
    rng = random.Random(7)
    subset = [_tx(f"new-{i}", t.date, t.amount, t.description) for i, t in enumerate(LEDGER[:3])]
    rng.shuffle(subset)
    assert dedupe(LEDGER, subset) == []


def test_new_rows_survive_in_input_order():
    fresh = [
        _tx("n1", "2024-05-05", -800, "ドラッグストア"),
        _tx("dup", "2024-05-01", -500, "コンビニA"),
        _tx("n2", "2024-05-01", -501, "コンビニA"),
    ]
    assert [tx.id for tx in dedupe(LEDGER, fresh)] == ["n1", "n2"]


def test_identical_rows_within_one_batch_are_all_kept():
    twice = [_tx("x", "2024-05-06", -150, "自販機"), _tx("y", "2024-05-06", -150, "自販機")]
    assert dedupe(LEDGER, twice) == twice


def test_empty_ledger_keeps_everything():
    assert dedupe([], LEDGER) == LEDGER

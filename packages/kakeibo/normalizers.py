"""Statement row → canonical :class:`~kakeibo.models.Transaction` normalizers.

One pure function per source format maps a header-keyed row to a draft
(date, description, signed amount, exclusion and category decision);
:func:`normalize_row` dispatches on the detected format, applies the common
drop rule and assigns the transaction id.

Exclusion exists to avoid double counting the user's own transfers: a wallet
top-up charged to the card, the card settlement debited from the bank, and
the wallet's own charge line all describe the same spend.
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date as _date

from .logging_setup import get_logger
from .models import (
    UNRESOLVED_CATEGORY,
    RawRow,
    SourceKind,
    Transaction,
    TransactionSource,
)

_logger = get_logger("kakeibo.normalizers")

UNKNOWN_DESCRIPTION = "不明な取引"
PAYPAY_UNKNOWN_RECIPIENT = "使途不明"
JP_BANK_DEFAULT_LABEL = "ゆうちょ銀行"

REASON_CARD = "auto: card/fixed cost"
REASON_UTILITY = "auto: utility bill"
REASON_SUBSCRIPTION = "auto: subscription/gym"
REASON_NEEDS_REVIEW = "auto: needs manual review"

# ---------------------------------------------------------------------------
# Helpers (amount/date normalization)
# ---------------------------------------------------------------------------

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_YYYYMMDD_RE = re.compile(r"^\d{8}$")
_CALENDAR_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def _to_int(raw: str | None) -> int:
    """Parse the leading integer of an amount cell; empty cells are ``0``.

    Thousands separators and yen markers are ignored and full-width digits are
    folded to ASCII. Trailing text (``"1000.5"``, ``"500円"``) is ignored, but
    a cell without a leading integer raises ``ValueError``.
    """

    if raw is None:
        return 0
    s = unicodedata.normalize("NFKC", raw).replace(",", "").strip()
    s = s.lstrip("¥\\").replace("円", "").strip()
    # PayPay writes "-" into unused amount columns.
    if s in ("", "-"):
        return 0
    m = _LEADING_INT_RE.match(s)
    if m is None:
        raise ValueError(f"invalid amount: {raw!r}")
    return int(m.group(0))


def normalize_date(value: str | None) -> str:
    """``YYYYMMDD`` becomes ``YYYY-MM-DD``; otherwise ``/`` and ``.`` become ``-``."""

    if not value:
        return ""
    s = value.strip()
    if _YYYYMMDD_RE.match(s):
        return f"{s[:4]}-{s[4:6]}-{s[6:8]}"
    return s.replace("/", "-").replace(".", "-")


def is_calendar_date(value: str) -> bool:
    """True for a real ``YYYY-M-D`` date, zero padding optional."""

    m = _CALENDAR_DATE_RE.match(value)
    if m is None:
        return False
    try:
        _date(*(int(g) for g in m.groups()))
    except ValueError:
        return False
    return True


def _first_non_empty(row: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        v = row.get(key)
        if v is None:
            continue
        t = v.strip()
        if t:
            return t
    return None


def _signed_amount(outflow: int, inflow: int) -> int:
    if outflow > 0:
        return -outflow
    if inflow > 0:
        return inflow
    return 0


@dataclass(frozen=True, slots=True)
class _Draft:
    date: str
    description: str
    amount: int
    is_excluded: bool = False
    category_id: str = UNRESOLVED_CATEGORY
    auto_category_reason: str | None = None


# ---------------------------------------------------------------------------
# Rakuten Card
# ---------------------------------------------------------------------------

_RAKUTEN_PAYPAY_MARKERS = ("ペイペイ", "ＰＡＹＰＡＹ")


def _normalize_rakuten(row: RawRow) -> _Draft | None:
    # Headers: 利用日, 利用店名・商品名, 利用者, 支払方法, 利用金額, 支払総額, ...
    raw_date = _first_non_empty(row, ("利用日",))
    if raw_date is None:
        return None
    description = (row.get("利用店名・商品名") or "").strip()
    # Card charges are always outflow.
    amount = -1 * _to_int(row.get("支払総額"))

    # PayPay top-ups charged to the card reappear as spend in the wallet export.
    is_excluded = any(m in description for m in _RAKUTEN_PAYPAY_MARKERS) or (
        "PAYPAY" in description.upper()
    )
    return _Draft(
        date=raw_date.replace("/", "-"),
        description=description,
        amount=amount,
        is_excluded=is_excluded,
    )


# ---------------------------------------------------------------------------
# PayPay
# ---------------------------------------------------------------------------

# 種別 values that move money between the user's own accounts.
_PAYPAY_TRANSFER_KINDS = frozenset({"チャージ", "出金", "PayPayカード決済"})
_PAYPAY_TRANSFER_MARKERS = ("チャージ", "PayPayカード")


def _normalize_paypay(row: RawRow) -> _Draft | None:
    # Headers: 取引日, 出金金額（円）, 入金金額（円）, 海外出金金額, 通貨, 変換レート（円）,
    # 利用国, 取引内容, 取引先, 取引方法, 支払い区分, 利用者, 取引番号
    raw_date = _first_non_empty(row, ("取引日", "日時"))
    if raw_date is None:
        return None
    date = raw_date.split()[0].replace("/", "-")
    description = _first_non_empty(row, ("取引先", "店名・宛先", "店名")) or PAYPAY_UNKNOWN_RECIPIENT

    outflow = _to_int(_first_non_empty(row, ("出金金額（円）", "出金金額")))
    inflow = _to_int(_first_non_empty(row, ("入金金額（円）", "入金金額")))
    amount = _signed_amount(outflow, inflow)
    if amount == 0:
        return None

    kind = (row.get("種別") or "").strip()
    # Point usage is deliberately not treated as a transfer.
    is_excluded = kind in _PAYPAY_TRANSFER_KINDS or any(
        m in description for m in _PAYPAY_TRANSFER_MARKERS
    )
    return _Draft(date=date, description=description, amount=amount, is_excluded=is_excluded)


# ---------------------------------------------------------------------------
# JP Bank (Yucho)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _BankLine:
    detail1: str
    detail2: str
    # Upper-cased description used for whitelist/fallback matching.
    haystack: str


type _Predicate = Callable[[_BankLine, _Draft], bool]
type _Action = Callable[[_Draft], _Draft]


@dataclass(frozen=True, slots=True)
class _Rule:
    name: str
    predicate: _Predicate
    action: _Action


def _contains_any(text: str, markers: Iterable[str]) -> bool:
    return any(m in text for m in markers)


def _rescue(category_id: str, reason: str) -> _Action:
    def _apply(d: _Draft) -> _Draft:
        return replace(d, is_excluded=False, category_id=category_id, auto_category_reason=reason)

    return _apply


def _exclude(d: _Draft) -> _Draft:
    return replace(d, is_excluded=True)


def _flag_for_review(d: _Draft) -> _Draft:
    return replace(d, auto_category_reason=REASON_NEEDS_REVIEW)


_CARD_SERVICE_MARKERS = ("ﾗｸﾃﾝｶｰﾄﾞｻｰﾋ", "(PAYPAY)", "（ＰＡＹＰＡＹ）")
_CARD_MARKERS = ("カード", "ＲＴ")
_CARD_ISSUER_MARKERS = ("三井住友", "ミツイスミトモ", "ＳＭＣＣ", "ＳＭＢＣ")
_UTILITY_MARKERS = ("ｷｮｳｴｲｶﾞｽ", "ガス", "電気", "電力", "水道")
_GYM_MARKERS = ("エニタイム", "ANYTIME", "ＡＦ")

# Each stage applies the first matching rule. Stages run in order, so the
# whitelist rescues override the blacklist.
_JP_BANK_RULE_CHAIN: tuple[tuple[_Rule, ...], ...] = (
    (
        _Rule(
            "card-service settlement",
            lambda b, d: _contains_any(b.detail2, _CARD_SERVICE_MARKERS),
            _exclude,
        ),
        _Rule("card debit", lambda b, d: _contains_any(b.detail1, _CARD_MARKERS), _exclude),
    ),
    (
        _Rule(
            "card issuer",
            lambda b, d: _contains_any(b.haystack, _CARD_ISSUER_MARKERS),
            _rescue("credit_card", REASON_CARD),
        ),
        _Rule(
            "utility",
            lambda b, d: _contains_any(b.haystack, _UTILITY_MARKERS),
            _rescue("utilities", REASON_UTILITY),
        ),
        _Rule(
            "gym",
            lambda b, d: "DF.ｴﾆﾀｲﾑ" in b.detail2 or _contains_any(b.haystack, _GYM_MARKERS),
            _rescue("subscription", REASON_SUBSCRIPTION),
        ),
    ),
    (
        _Rule(
            "self payment",
            lambda b, d: (
                not d.is_excluded
                and d.category_id == UNRESOLVED_CATEGORY
                and "自払" in b.haystack
            ),
            _flag_for_review,
        ),
    ),
)


def classify_bank_line(
    line: _BankLine,
    draft: _Draft,
    chain: Sequence[Sequence[_Rule]] = _JP_BANK_RULE_CHAIN,
) -> _Draft:
    for stage in chain:
        for rule in stage:
            if rule.predicate(line, draft):
                draft = rule.action(draft)
                break
    return draft


def _normalize_jp_bank(row: RawRow) -> _Draft | None:
    # Headers: 取引日, 入出金明細ＩＤ, 受入金額（円）, 払出金額（円）, 詳細１, 詳細２, 現在（貸付）高
    raw_date = _first_non_empty(row, ("取引日", "年月日", "お取扱年月日"))
    if raw_date is None:
        return None
    date = normalize_date(raw_date)

    detail1 = row.get("詳細１") or ""
    detail2 = row.get("詳細２") or ""
    description = (
        f"{detail1} {detail2}".strip()
        or _first_non_empty(row, ("お取扱内容",))
        or JP_BANK_DEFAULT_LABEL
    )

    outflow = _to_int(_first_non_empty(row, ("払出金額（円）", "お引出し金額")))
    inflow = _to_int(_first_non_empty(row, ("受入金額（円）", "お預り金額")))
    amount = _signed_amount(outflow, inflow)
    if amount == 0:
        # Balance-only informational lines
        return None

    draft = _Draft(date=date, description=description, amount=amount)
    return classify_bank_line(_BankLine(detail1, detail2, description.upper()), draft)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_NORMALIZERS: dict[SourceKind, Callable[[RawRow], _Draft | None]] = {
    SourceKind.RAKUTEN: _normalize_rakuten,
    SourceKind.PAYPAY: _normalize_paypay,
    SourceKind.JP_BANK: _normalize_jp_bank,
}


def _new_id() -> str:
    return str(uuid.uuid4())


def normalize_row(source_kind: SourceKind, row: RawRow) -> Transaction | None:
    """Map one statement row to a :class:`Transaction`, or ``None`` to drop it.

    Rows without a date, rows with a zero amount that were not explicitly
    excluded, and rows whose extraction fails are dropped. Failures are logged
    and never propagate past the row.
    """

    fn = _NORMALIZERS.get(source_kind)
    if fn is None:
        raise ValueError(f"unsupported source kind: {source_kind!r}")

    try:
        draft = fn(row)
    except Exception:
        _logger.warning("skipping %s row after extraction error", source_kind, exc_info=True)
        return None

    if draft is None or not draft.date:
        return None
    if draft.amount == 0 and not draft.is_excluded:
        return None

    return Transaction(
        id=_new_id(),
        date=draft.date,
        source=TransactionSource(str(source_kind)),
        description=draft.description or UNKNOWN_DESCRIPTION,
        amount=draft.amount,
        category_id=draft.category_id,
        is_excluded=draft.is_excluded,
        auto_category_reason=draft.auto_category_reason,
        original_row=dict(row),
    )


def normalize_rows(source_kind: SourceKind, rows: Iterable[RawRow]) -> Iterator[Transaction]:
    for row in rows:
        tx = normalize_row(source_kind, row)
        if tx is not None:
            yield tx


def new_manual_transaction(
    *,
    date: str,
    description: str,
    amount: int,
    category_id: str = UNRESOLVED_CATEGORY,
) -> Transaction:
    """Build a manually entered transaction (cash payments and the like).

    Raises ``ValueError`` for a malformed date or a zero amount.
    """

    iso = normalize_date(date)
    try:
        _date.fromisoformat(iso)
    except ValueError as exc:
        raise ValueError(f"invalid date: {date!r}") from exc
    if amount == 0:
        raise ValueError("amount must be non-zero")

    return Transaction(
        id=_new_id(),
        date=iso,
        source=TransactionSource.MANUAL,
        description=description.strip() or UNKNOWN_DESCRIPTION,
        amount=amount,
        category_id=category_id or UNRESOLVED_CATEGORY,
        original_row={},
        is_manual=True,
    )


__all__ = [
    "UNKNOWN_DESCRIPTION",
    "PAYPAY_UNKNOWN_RECIPIENT",
    "JP_BANK_DEFAULT_LABEL",
    "REASON_CARD",
    "REASON_UTILITY",
    "REASON_SUBSCRIPTION",
    "REASON_NEEDS_REVIEW",
    "normalize_date",
    "is_calendar_date",
    "normalize_row",
    "normalize_rows",
    "new_manual_transaction",
]

"""Statement format detection by header signature.

Bank and wallet exports prepend a preamble of variable length (account
summaries, disclaimers) before the real column header, and the header line
moves between exports from the same provider. The detector therefore scans a
bounded prefix of the text for the first line carrying a known signature.

Signatures are plain substring tests and are not mutually exclusive, so the
rule table is evaluated in order and the first match wins.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import DetectionResult, SourceKind

MAX_SCAN_LINES = 50

_LINE_SPLIT_RE = re.compile(r"\r\n|\n|\r")


@dataclass(frozen=True, slots=True)
class _Signature:
    source_kind: SourceKind
    all_of: tuple[str, ...]
    any_of: tuple[str, ...] = ()

    def matches(self, line: str) -> bool:
        if not all(token in line for token in self.all_of):
            return False
        return not self.any_of or any(token in line for token in self.any_of)


SIGNATURES: tuple[_Signature, ...] = (
    # Rakuten Card: 利用日, 利用店名・商品名, 支払総額
    _Signature(SourceKind.RAKUTEN, ("利用日", "利用店名", "支払総額")),
    # PayPay: 取引日, 出金金額（円）, 入金金額（円）, 取引先
    _Signature(SourceKind.PAYPAY, ("取引日", "出金金額", "入金金額", "取引先")),
    # Legacy PayPay export
    _Signature(SourceKind.PAYPAY, ("日時", "店名", "金額")),
    # JP Bank: 取引日, 受入金額（円）, 払出金額（円）, 詳細１
    _Signature(SourceKind.JP_BANK, ("取引日", "受入金額", "払出金額")),
    # Older JP Bank export
    _Signature(SourceKind.JP_BANK, ("お取扱年月日",), ("お引出し", "入出金")),
)


def split_lines(text: str) -> list[str]:
    """Split on ``\\r\\n``, ``\\n`` and ``\\r`` uniformly."""

    return _LINE_SPLIT_RE.split(text)


def detect_format(
    text: str,
    *,
    signatures: Sequence[_Signature] = SIGNATURES,
    max_lines: int = MAX_SCAN_LINES,
) -> DetectionResult:
    """Return the source format and the 0-based index of its header line."""

    for idx, line in enumerate(split_lines(text)[:max_lines]):
        for sig in signatures:
            if sig.matches(line):
                return DetectionResult(sig.source_kind, idx)
    return DetectionResult(SourceKind.UNKNOWN, 0)


__all__ = ["MAX_SCAN_LINES", "SIGNATURES", "split_lines", "detect_format"]

from __future__ import annotations

import pytest

from kakeibo.ingest.detect import MAX_SCAN_LINES, detect_format, split_lines
from kakeibo.models import DetectionResult, SourceKind

RAKUTEN_HEADER = "利用日,利用店名・商品名,利用者,支払方法,利用金額,支払手数料,支払総額"
PAYPAY_HEADER = "取引日,出金金額（円）,入金金額（円）,海外出金金額,通貨,取引内容,取引先,取引方法,種別"
PAYPAY_LEGACY_HEADER = "日時,店名・宛先,金額,種別"
JP_BANK_HEADER = "取引日,入出金明細ＩＤ,受入金額（円）,払出金額（円）,詳細１,詳細２,現在（貸付）高"
JP_BANK_LEGACY_HEADER = "お取扱年月日,お取扱内容,お預り金額,お引出し金額,残高"


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (RAKUTEN_HEADER, SourceKind.RAKUTEN),
        (PAYPAY_HEADER, SourceKind.PAYPAY),
        (PAYPAY_LEGACY_HEADER, SourceKind.PAYPAY),
        (JP_BANK_HEADER, SourceKind.JP_BANK),
        (JP_BANK_LEGACY_HEADER, SourceKind.JP_BANK),
        ("お取扱年月日,入出金区分,金額ラベル", SourceKind.JP_BANK),
    ],
)
def test_detects_each_signature_on_first_line(header: str, expected: SourceKind):
    assert detect_format(header + "\n2024/05/03,x\n") == DetectionResult(expected, 0)


@pytest.mark.parametrize("preamble_lines", [0, 1, 9, MAX_SCAN_LINES - 1])
def test_preamble_depth_does_not_change_source_kind(preamble_lines: int):
    preamble = "".join(f"口座番号 {i},,\n" if i % 2 else "\n" for i in range(preamble_lines))
    result = detect_format(preamble + JP_BANK_HEADER + "\n20240503,1,,500,ｶｰﾄﾞ,,\n")
    assert result.source_kind is SourceKind.JP_BANK
    assert result.header_line_index == preamble_lines


def test_header_beyond_scan_window_is_unknown():
    text = "\n" * MAX_SCAN_LINES + RAKUTEN_HEADER + "\n"
    assert detect_format(text) == DetectionResult(SourceKind.UNKNOWN, 0)


def test_mixed_line_endings_are_counted_uniformly():
    text = "preamble\r\nmore\rstill more\n" + PAYPAY_HEADER + "\r\n"
    assert detect_format(text) == DetectionResult(SourceKind.PAYPAY, 3)
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


def test_first_matching_rule_wins_for_overlapping_signatures():
    # Carries both the PayPay and the JP Bank tokens; PayPay is checked first.
    line = "取引日,出金金額,入金金額,取引先,受入金額,払出金額"
    assert detect_format(line).source_kind is SourceKind.PAYPAY


def test_legacy_jp_bank_requires_one_of_the_movement_tokens():
    assert detect_format("お取扱年月日,お取扱内容,残高\n").source_kind is SourceKind.UNKNOWN


def test_empty_text_is_unknown():
    assert detect_format("") == DetectionResult(SourceKind.UNKNOWN, 0)
    assert not detect_format("").recognized
